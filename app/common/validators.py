"""
Validadores de datos bancarios y fiscales
"""
import re


def normalize_iban(iban: str) -> str:
    """Quitar espacios y pasar a mayúsculas"""
    return re.sub(r'\s+', '', iban or '').upper()


def validate_iban(iban: str) -> bool:
    """
    Valida un IBAN según ISO 13616.
    - 15 a 34 caracteres alfanuméricos
    - Empieza con código de país (2 letras) y 2 dígitos de control
    - Verificación mod-97 == 1
    """
    cleaned = normalize_iban(iban)

    if not re.match(r'^[A-Z]{2}[0-9]{2}[A-Z0-9]{11,30}$', cleaned):
        return False

    # Mover los 4 primeros caracteres al final y convertir letras a números (A=10 ... Z=35)
    rearranged = cleaned[4:] + cleaned[:4]
    numeric = ''.join(str(int(ch, 36)) for ch in rearranged)

    return int(numeric) % 97 == 1
