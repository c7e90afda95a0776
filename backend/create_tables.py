#!/usr/bin/env python3
"""
Script pour créer toutes les tables de la base de données RentDesk
"""
from sqlalchemy import inspect

from database import engine
import models


def create_all_tables():
    """Crée toutes les tables définies dans models.py"""
    print(f"Creation des tables sur {engine.url.render_as_string(hide_password=True)}...")

    models.Base.metadata.create_all(bind=engine)
    print("Tables creees avec succes!")

    # Lister les tables créées
    tables = inspect(engine).get_table_names()
    print(f"\nTables disponibles ({len(tables)}):")
    for table in sorted(tables):
        print(f"  - {table}")
    return tables


if __name__ == "__main__":
    create_all_tables()
