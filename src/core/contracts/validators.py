"""
JSON Schema Contract Validators

Модуль для валидации выходных записей движка согласно формальным JSON Schema
контрактам. Использует библиотеку jsonschema (Draft 2020-12).

Схемы (src/core/contracts/schema/):
- schedule_row.json: строка выходного расписания
- verification_report.json: отчёт ScheduleVerifier
"""

import json
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator

import jsonschema
from jsonschema import Draft202012Validator, ValidationError


# =============================================================================
# SCHEMA LOADER
# =============================================================================


class SchemaLoader:
    """
    Загрузчик JSON Schema файлов.

    Схемы лежат рядом с модулем в каталоге schema/.
    """

    def __init__(self, schema_dir: Path | None = None):
        self._schema_dir = schema_dir or Path(__file__).parent / "schema"
        if not self._schema_dir.exists():
            raise RuntimeError(f"Schema directory not found: {self._schema_dir}")

        # Кэш загруженных схем
        self._schemas: Dict[str, Dict[str, Any]] = {}

    def load_schema(self, schema_name: str) -> Dict[str, Any]:
        """
        Загрузка JSON Schema файла.

        Args:
            schema_name: Имя схемы без расширения (например, 'schedule_row')

        Returns:
            Загруженная схема как dict

        Raises:
            FileNotFoundError: Если файл схемы не найден
            ValueError: Если схема не проходит meta-validation
        """
        if schema_name in self._schemas:
            return self._schemas[schema_name]

        schema_path = self._schema_dir / f"{schema_name}.json"
        if not schema_path.exists():
            raise FileNotFoundError(f"Schema not found: {schema_path}")

        with open(schema_path, "r", encoding="utf-8") as f:
            schema = json.load(f)

        try:
            Draft202012Validator.check_schema(schema)
        except jsonschema.SchemaError as e:
            raise ValueError(f"Invalid JSON Schema in {schema_name}.json: {e}") from e

        self._schemas[schema_name] = schema
        return schema


# Глобальный экземпляр загрузчика
_SCHEMA_LOADER = SchemaLoader()


# =============================================================================
# CONTRACT VALIDATORS
# =============================================================================


class ContractValidator:
    """
    Базовый класс для валидаторов контрактов.

    Инкапсулирует логику валидации данных против JSON Schema.
    """

    def __init__(self, schema_name: str):
        self.schema_name = schema_name
        self.schema = _SCHEMA_LOADER.load_schema(schema_name)
        self.validator = Draft202012Validator(self.schema)

    def validate(self, data: Dict[str, Any]) -> None:
        """
        Валидация данных против схемы.

        Raises:
            ValidationError: Если данные не соответствуют схеме
        """
        self.validator.validate(data)

    def is_valid(self, data: Dict[str, Any]) -> bool:
        return self.validator.is_valid(data)

    def iter_errors(self, data: Dict[str, Any]) -> Iterator[ValidationError]:
        return self.validator.iter_errors(data)


class ScheduleRowValidator(ContractValidator):
    """Валидатор строки выходного расписания."""

    def __init__(self):
        super().__init__("schedule_row")


class VerificationReportValidator(ContractValidator):
    """Валидатор отчёта верификации."""

    def __init__(self):
        super().__init__("verification_report")


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================


def validate_schedule_row(data: Dict[str, Any]) -> None:
    """
    Валидация одной строки расписания.

    Raises:
        ValidationError: Если данные не соответствуют схеме
    """
    ScheduleRowValidator().validate(data)


def validate_schedule_rows(rows: Iterable[Dict[str, Any]]) -> int:
    """
    Валидация всех строк расписания одним валидатором.

    Returns:
        Количество проверенных строк

    Raises:
        ValidationError: На первой строке, не соответствующей схеме
    """
    validator = ScheduleRowValidator()
    count = 0
    for row in rows:
        validator.validate(row)
        count += 1
    return count


def validate_verification_report(data: Dict[str, Any]) -> None:
    """
    Валидация отчёта верификации.

    Raises:
        ValidationError: Если данные не соответствуют схеме
    """
    VerificationReportValidator().validate(data)
