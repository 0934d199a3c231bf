"""Domain layer for famfin application.

Services are resolved lazily: they depend on ``famfin.database.base``, which
itself imports ``famfin.domain.entities`` and so runs this module first.
"""

from importlib import import_module

_SERVICES = {
    "TransactionService": "famfin.domain.transaction",
    "CategoryService": "famfin.domain.category",
    "CardService": "famfin.domain.card",
    "FamilyMemberService": "famfin.domain.family",
    "StatementImportService": "famfin.domain.statement_import",
}

__all__ = list(_SERVICES)


def __getattr__(name):
    if name in _SERVICES:
        return getattr(import_module(_SERVICES[name]), name)
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
