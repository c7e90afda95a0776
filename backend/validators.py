"""
Validateurs réutilisables pour l'application RentDesk
Centralisation de toute la logique de validation pour éviter la duplication
"""
import re
from decimal import Decimal
from typing import Optional, List

from constants import MIN_PASSWORD_LENGTH, MAX_PASSWORD_LENGTH, MAX_RENT_AMOUNT


class CommonValidators:
    """Validateurs communs utilisés dans plusieurs schémas"""

    @staticmethod
    def validate_password(password: str) -> str:
        """
        Valide la longueur et la complexité minimale du mot de passe
        """
        if len(password) < MIN_PASSWORD_LENGTH:
            raise ValueError(f'Password must be at least {MIN_PASSWORD_LENGTH} characters')

        if len(password) > MAX_PASSWORD_LENGTH:
            raise ValueError(f'Password must be at most {MAX_PASSWORD_LENGTH} characters')

        if not re.search(r'[A-Za-z]', password) or not re.search(r'[0-9]', password):
            raise ValueError('Password must contain at least one letter and one digit')

        return password

    @staticmethod
    def validate_phone(phone: Optional[str]) -> Optional[str]:
        """
        Valide le format du numéro de téléphone
        """
        if phone is None:
            return phone

        # Nettoyer le numéro (enlever espaces, tirets, points, parenthèses)
        cleaned_phone = re.sub(r'[\s\-\.\(\)]', '', phone)
        if not cleaned_phone:
            return None

        if not re.match(r'^\+?\d{7,15}$', cleaned_phone):
            raise ValueError('Invalid phone number format')

        return cleaned_phone

    @staticmethod
    def validate_name(name: str, field_name: str = "name") -> str:
        """
        Valide les noms (personne, bien, entreprise)
        """
        if not name or len(name.strip()) == 0:
            raise ValueError(f'{field_name.capitalize()} cannot be empty')

        name = name.strip()
        if len(name) > 255:
            raise ValueError(f'{field_name.capitalize()} cannot exceed 255 characters')

        return name

    @staticmethod
    def validate_optional_name(name: Optional[str], field_name: str = "name") -> Optional[str]:
        if name is None:
            return name
        return CommonValidators.validate_name(name, field_name)

    @staticmethod
    def validate_amount(value: Optional[Decimal], field_name: str = "amount") -> Optional[Decimal]:
        """
        Valide un montant (loyer, dépôt, paiement)
        """
        if value is None:
            return value

        if value < 0:
            raise ValueError(f'{field_name.capitalize()} cannot be negative')

        if value > MAX_RENT_AMOUNT:
            raise ValueError(f'{field_name.capitalize()} cannot exceed {MAX_RENT_AMOUNT}')

        return value

    @staticmethod
    def validate_count(value: Optional[int], field_name: str, maximum: int) -> Optional[int]:
        """
        Valide un compteur (chambres, salles de bain)
        """
        if value is None:
            return value

        if value < 0:
            raise ValueError(f'{field_name.capitalize()} cannot be negative')

        if value > maximum:
            raise ValueError(f'{field_name.capitalize()} cannot exceed {maximum}')

        return value

    @staticmethod
    def validate_unique_strings(values: Optional[List[str]]) -> Optional[List[str]]:
        """
        Nettoie une liste de chaînes en conservant l'ordre et sans doublons
        """
        if values is None:
            return values

        seen = []
        for value in values:
            cleaned = value.strip()
            if cleaned and cleaned not in seen:
                seen.append(cleaned)
        return seen

    @staticmethod
    def reject_null(value, field_name: str):
        """
        Refuse un null explicite sur un champ obligatoire d'une mise à jour partielle
        """
        if value is None:
            raise ValueError(f'{field_name.capitalize()} cannot be null')
        return value

    @staticmethod
    def validate_search(search: Optional[str]) -> Optional[str]:
        """
        Terme de recherche: espaces retirés, vide traité comme absent
        """
        if search is None:
            return None
        search = search.strip()
        return search or None
