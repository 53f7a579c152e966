from logging.config import fileConfig
from alembic import context
from sqlalchemy import engine_from_config, pool
import os
from ncr_tracker.db.session import Base

# import models
from ncr_tracker.models.user import User
from ncr_tracker.models.production_line import ProductionLine
from ncr_tracker.models.product import Product
from ncr_tracker.models.client import Client
from ncr_tracker.models.reference import DescriptionType, Format
from ncr_tracker.models.report import NonConformityReport

config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name)
target_metadata = Base.metadata

def get_url():
    return os.getenv("DATABASE_URL")

def run_migrations_offline():
    context.configure(url=get_url(), target_metadata=target_metadata, literal_binds=True, compare_type=True)
    with context.begin_transaction():
        context.run_migrations()

def run_migrations_online():
    cfg = config.get_section(config.config_ini_section) or {}
    cfg["sqlalchemy.url"] = get_url()
    connectable = engine_from_config(cfg, prefix="sqlalchemy.", poolclass=pool.NullPool)
    with connectable.connect() as connection:
        context.configure(connection=connection, target_metadata=target_metadata, compare_type=True)
        with context.begin_transaction():
            context.run_migrations()

if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
