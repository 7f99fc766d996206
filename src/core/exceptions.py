"""
Exceptions — таксономия ошибок движка расписаний

Три класса проблем:
- DomainError: нарушено математическое предусловие (фатально для вычисления)
- ToleranceMismatch: closed-form и численная сумма расходятся (не фатально,
  возбуждается только если caller явно об этом попросил)
- ConfigurationWarning: параметр вне рекомендуемого диапазона (только warning)
"""

from typing import Any


class DomainError(ValueError):
    """
    Нарушение математического предусловия.

    Сообщение всегда называет нарушенное неравенство и фактические значения.

    Attributes:
        inequality: Нарушенное неравенство в текстовом виде (например, 'p0 > 0')
        values: Значения участвующих параметров
    """

    def __init__(self, inequality: str, **values: Any):
        self.inequality = inequality
        self.values = values
        rendered = ", ".join(f"{name}={value!r}" for name, value in values.items())
        message = f"Domain violation: require {inequality}"
        if rendered:
            message += f"; got {rendered}"
        super().__init__(message)


class ToleranceMismatch(ArithmeticError):
    """
    Расхождение closed-form и численной суммы сверх допуска,
    либо немонотонные цены / отрицательные аллокации.

    В обычном режиме это значение VerificationReport, а не exception.
    """

    def __init__(self, message: str, issues: list[str] | None = None):
        super().__init__(message)
        self.issues = issues or []


class ConfigurationWarning(UserWarning):
    """Параметр вне рекомендуемого диапазона. Никогда не блокирует расчёт."""
