"""Default category set seeded into new stores."""

from famfin.domain.entities import CategoryType

# (id, name, type, color)
DEFAULT_CATEGORIES = [
    ("10000000-0000-0000-0000-000000000001", "Salário", CategoryType.INCOME, "#22c55e"),
    ("10000000-0000-0000-0000-000000000002", "Freelance", CategoryType.INCOME, "#10b981"),
    ("10000000-0000-0000-0000-000000000003", "Investimentos", CategoryType.INCOME, "#14b8a6"),
    ("10000000-0000-0000-0000-000000000004", "Outros", CategoryType.INCOME, "#06b6d4"),
    ("20000000-0000-0000-0000-000000000001", "Alimentação", CategoryType.EXPENSE, "#f97316"),
    ("20000000-0000-0000-0000-000000000002", "Transporte", CategoryType.EXPENSE, "#eab308"),
    ("20000000-0000-0000-0000-000000000003", "Moradia", CategoryType.EXPENSE, "#ef4444"),
    ("20000000-0000-0000-0000-000000000004", "Saúde", CategoryType.EXPENSE, "#ec4899"),
    ("20000000-0000-0000-0000-000000000005", "Educação", CategoryType.EXPENSE, "#8b5cf6"),
    ("20000000-0000-0000-0000-000000000006", "Lazer", CategoryType.EXPENSE, "#6366f1"),
    ("20000000-0000-0000-0000-000000000007", "Contas", CategoryType.EXPENSE, "#0ea5e9"),
    ("20000000-0000-0000-0000-000000000008", "Compras", CategoryType.EXPENSE, "#84cc16"),
    ("20000000-0000-0000-0000-000000000009", "Outros", CategoryType.EXPENSE, "#64748b"),
]

FALLBACK_CATEGORY_NAME = "Outros"
