"""
Mixins pour les modèles SQLAlchemy
Séparation des responsabilités et réutilisabilité des fonctionnalités communes
"""
from sqlalchemy import Column, String, DateTime
from sqlalchemy.sql import func


class TimestampMixin:
    """
    Mixin pour ajouter des timestamps automatiques
    """
    created_at = Column(DateTime, default=func.now(), nullable=False, comment="Date de création")
    updated_at = Column(DateTime, default=func.now(), onupdate=func.now(), nullable=False, comment="Date de dernière modification")


class AddressMixin:
    """
    Mixin pour les champs d'adresse d'un bien
    """
    address = Column(String(500), nullable=False, comment="Rue et numéro")
    city = Column(String(200), nullable=False, comment="Ville")
    state = Column(String(200), nullable=False, comment="État / région")
    zip_code = Column(String(20), nullable=False, comment="Code postal")

    @property
    def full_address(self) -> str:
        """
        Retourne l'adresse complète formatée
        """
        city_line = " ".join(part for part in [self.state, self.zip_code] if part)
        full_parts = [part for part in [self.address, self.city, city_line] if part]
        return ", ".join(full_parts)


class ContactMixin:
    """
    Mixin pour les informations de contact d'un profil
    """
    phone_number = Column(String(50), nullable=True, comment="Numéro de téléphone")
