"""Data validation functionality."""

from abc import ABC, abstractmethod
from typing import List, Tuple, Dict, Any
import pandas as pd


class ValidationRule(ABC):
    """Abstract base class for validation rules."""

    @abstractmethod
    def validate(self, df: pd.DataFrame) -> Tuple[bool, str]:
        """
        Validate dataframe against rule.

        Returns:
            Tuple of (is_valid, error_message)
        """
        pass


class RequiredColumnsRule(ValidationRule):
    """Ensure required columns are present."""

    def __init__(self, required_columns: List[str]):
        self.required_columns = required_columns

    def validate(self, df: pd.DataFrame) -> Tuple[bool, str]:
        missing = set(self.required_columns) - set(df.columns)
        if missing:
            return False, f"Missing required columns: {sorted(missing)}"
        return True, ""


class UniqueIdsRule(ValidationRule):
    """Warn when post identifiers repeat; comment counts would be shared."""

    def __init__(self, id_column: str = "id"):
        self.id_column = id_column

    def validate(self, df: pd.DataFrame) -> Tuple[bool, str]:
        if self.id_column not in df.columns:
            return True, ""

        duplicates = df[self.id_column].duplicated().sum()
        if duplicates:
            return False, f"Found {duplicates} duplicated {self.id_column} values"
        return True, ""


class DataValidator:
    """Validate raw post and comment tables before enrichment."""

    def __init__(self):
        self.rules: List[ValidationRule] = []
        self.warning_rules: List[ValidationRule] = []

    def add_rule(self, rule: ValidationRule) -> 'DataValidator':
        """Add validation rule."""
        self.rules.append(rule)
        return self

    def add_warning(self, rule: ValidationRule) -> 'DataValidator':
        """Add a rule whose failure is reported but does not invalidate."""
        self.warning_rules.append(rule)
        return self

    def validate(self, df: pd.DataFrame) -> Dict[str, Any]:
        """
        Run all validation rules.

        Returns:
            Dictionary with validation results
        """
        results = {
            'is_valid': True,
            'errors': [],
            'warnings': []
        }

        for rule in self.rules:
            is_valid, message = rule.validate(df)
            if not is_valid:
                results['is_valid'] = False
                results['errors'].append({
                    'rule': rule.__class__.__name__,
                    'message': message
                })

        for rule in self.warning_rules:
            is_valid, message = rule.validate(df)
            if not is_valid:
                results['warnings'].append({
                    'rule': rule.__class__.__name__,
                    'message': message
                })

        return results
