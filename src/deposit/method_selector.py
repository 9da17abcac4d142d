"""
Payment method selector.

A stateless view over the caller's current selection: it renders three
exclusive choices and reports a pick through the caller's callback.
"""
from dataclasses import dataclass
from typing import Callable, Dict, List, Union

from src.integrations.contracts.interfaces import PaymentMethod

METHOD_OPTIONS = [
    {'method': PaymentMethod.CARD, 'label': 'Credit Card', 'icon': 'credit-card'},
    {'method': PaymentMethod.CRYPTO, 'label': 'Crypto', 'icon': 'wallet'},
    {'method': PaymentMethod.MPESA, 'label': 'M-Pesa', 'icon': 'phone'},
]


@dataclass(frozen=True)
class PaymentMethodSelector:
    payment_method: Union[PaymentMethod, str, None]
    on_change: Callable[[PaymentMethod], None]
    disabled: bool = False

    def _current(self) -> str:
        value = self.payment_method
        return value.value if isinstance(value, PaymentMethod) else (value or '')

    def render(self) -> Dict:
        """Label plus one option per method; at most one is selected"""
        current = self._current()
        options: List[Dict] = []
        for option in METHOD_OPTIONS:
            selected = option['method'].value == current
            options.append({
                'method': option['method'].value,
                'label': option['label'],
                'icon': option['icon'],
                'variant': 'default' if selected else 'outline',
                'selected': selected,
                'disabled': self.disabled,
            })
        return {'label': 'Payment Method', 'options': options}

    def select(self, method: Union[PaymentMethod, str]) -> None:
        if self.disabled:
            return
        self.on_change(PaymentMethod(method))
