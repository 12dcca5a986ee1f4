"""USSD payment walk-throughs shown next to the business's payment number."""

import re
from typing import Optional

from domain.enums import PaymentMethod


MPESA_INSTRUCTIONS = (
    "Para efetuar o pagamento:\n\n"
    "1. Marque *150#\n"
    "2. Escolha \"Transferir dinheiro\"\n"
    "3. Selecione \"M-Pesa\"\n"
    "4. Digite o número: {phone}\n"
    "5. Digite o valor\n"
    "6. Confirme com o seu PIN\n\n"
    "Após confirmar, copie a mensagem de confirmação recebida."
)

EMOLA_INSTRUCTIONS = (
    "Para efetuar o pagamento:\n\n"
    "1. Marque *898#\n"
    "2. Escolha \"Transferir\"\n"
    "3. Digite o número: {phone}\n"
    "4. Digite o valor\n"
    "5. Confirme com o seu PIN\n\n"
    "Após confirmar, copie a mensagem de confirmação recebida."
)


def get_payment_instructions(method: Optional[PaymentMethod], phone_number: Optional[str]) -> str:
    """
    Step-by-step instructions for paying the business with ``method``.

    The number is shown digits-only, as typed into the USSD menu.
    Returns an empty string for an unknown method.
    """
    digits = re.sub(r'\D', '', phone_number or '')

    if method == PaymentMethod.MPESA:
        return MPESA_INSTRUCTIONS.format(phone=digits)
    if method == PaymentMethod.EMOLA:
        return EMOLA_INSTRUCTIONS.format(phone=digits)
    return ''
