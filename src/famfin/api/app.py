"""FastAPI application exposing the famfin services.

Structure:
    * create_application - factory wiring storage, error handlers and routes.
    * Error handlers - map domain errors onto HTTP status codes.

Every route builds its service for the acting user, taken from the
``X-User-Id`` header or the configured default. Request bodies are passed to
the services as plain dicts so validation errors keep their Portuguese
messages and camelCase paths.
"""

from typing import Any, Optional

from fastapi import Body, FastAPI, Header, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from famfin.api.serialization import to_json
from famfin.config import FamfinSettings, get_settings
from famfin.database import Storage, create_storage
from famfin.domain import (
    CardService,
    CategoryService,
    FamilyMemberService,
    StatementImportService,
    TransactionService,
)
from famfin.domain.errors import (
    ConflictError,
    DependencyError,
    NotFoundError,
    ValidationError,
    transaction_not_found,
)
from famfin.domain.schemas import EntityId, TransactionFilters, validate_payload
from famfin.logging_utils import get_logger

LOGGER = get_logger(__name__)

API_VERSION = "0.1.0"


def _entity_id(value: str) -> str:
    return validate_payload(EntityId, {"id": value}).id


def _register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(ValidationError)
    async def validation_failed(request: Request, exc: ValidationError) -> JSONResponse:
        LOGGER.warning("%s %s rejected: %s", request.method, request.url.path, exc)
        return JSONResponse(
            status_code=400,
            content={
                "error": "Validation failed",
                "issues": [issue.as_dict() for issue in exc.issues],
            },
        )

    @app.exception_handler(RequestValidationError)
    async def malformed_request(request: Request, exc: RequestValidationError) -> JSONResponse:
        LOGGER.warning("%s %s malformed: %s", request.method, request.url.path, exc.errors())
        issues = [
            {
                "path": ".".join(str(part) for part in err.get("loc", ()) if part != "body"),
                "message": "Formato inválido",
            }
            for err in exc.errors()
        ]
        return JSONResponse(
            status_code=400, content={"error": "Validation failed", "issues": issues}
        )

    @app.exception_handler(NotFoundError)
    async def not_found(request: Request, exc: NotFoundError) -> JSONResponse:
        LOGGER.info("%s %s: %s", request.method, request.url.path, exc)
        return JSONResponse(status_code=404, content={"error": str(exc)})

    async def conflict(request: Request, exc: Exception) -> JSONResponse:
        LOGGER.warning("%s %s blocked: %s", request.method, request.url.path, exc)
        return JSONResponse(status_code=409, content={"error": str(exc)})

    app.add_exception_handler(ConflictError, conflict)
    app.add_exception_handler(DependencyError, conflict)


def create_application(
    storage: Optional[Storage] = None, settings: Optional[FamfinSettings] = None
) -> FastAPI:
    """Create the FastAPI application with routes and error handlers.

    Args:
        storage: Storage backing every request. Built from settings if None.
        settings: Runtime settings. Defaults to ``get_settings()``.

    Returns:
        Configured FastAPI application
    """
    settings = settings or get_settings()
    db = storage if storage is not None else create_storage(settings)

    app = FastAPI(title="famfin", version=API_VERSION)
    _register_error_handlers(app)

    def acting_user(x_user_id: Optional[str]) -> Optional[str]:
        return x_user_id or settings.default_user_id

    # Handlers are async so storage calls never run concurrently
    @app.get("/api/health")
    async def health() -> dict[str, str]:
        return {"status": "ok", "version": API_VERSION}

    # Transactions
    @app.get("/api/transactions")
    async def list_transactions(
        request: Request, x_user_id: Optional[str] = Header(None)
    ) -> list[dict[str, Any]]:
        """List transactions, newest first, with card, member and status attached."""
        filters = validate_payload(TransactionFilters, dict(request.query_params))
        service = TransactionService(db, user_id=acting_user(x_user_id))
        transactions = service.list_transactions(**filters.to_filters())
        return to_json(service.enrich_transactions(transactions))

    @app.post("/api/transactions", status_code=201)
    async def create_transaction(
        payload: dict[str, Any] = Body(...), x_user_id: Optional[str] = Header(None)
    ) -> list[dict[str, Any]]:
        """Create a transaction; installments and recurrences expand into a series."""
        service = TransactionService(db, user_id=acting_user(x_user_id))
        return to_json(service.create_transaction(payload))

    @app.post("/api/transactions/batch", status_code=201)
    async def batch_create_transactions(
        payload: dict[str, Any] = Body(...), x_user_id: Optional[str] = Header(None)
    ) -> list[dict[str, Any]]:
        service = TransactionService(db, user_id=acting_user(x_user_id))
        return to_json(service.batch_create_transactions(payload))

    @app.get("/api/transactions/summary")
    async def transaction_summary(
        request: Request, x_user_id: Optional[str] = Header(None)
    ) -> dict[str, Any]:
        """Dashboard totals plus per-transaction running balances."""
        filters = validate_payload(TransactionFilters, dict(request.query_params))
        service = TransactionService(db, user_id=acting_user(x_user_id))
        transactions = service.list_transactions(**filters.to_filters())
        balances = service.get_running_balances(**filters.to_filters())
        LOGGER.debug("Summary over %s transactions", len(transactions))
        return {
            "summary": to_json(service.get_summary(**filters.to_filters())),
            "runningBalances": to_json(balances),
            "count": len(transactions),
        }

    @app.get("/api/transactions/{transaction_id}")
    async def get_transaction(
        transaction_id: str, x_user_id: Optional[str] = Header(None)
    ) -> dict[str, Any]:
        service = TransactionService(db, user_id=acting_user(x_user_id))
        transaction = service.get_transaction(_entity_id(transaction_id))
        if transaction is None:
            raise NotFoundError(transaction_not_found(transaction_id))
        return to_json(service.enrich_transactions([transaction])[0])

    @app.patch("/api/transactions/{transaction_id}")
    async def update_transaction(
        transaction_id: str,
        payload: dict[str, Any] = Body(...),
        x_user_id: Optional[str] = Header(None),
    ) -> dict[str, Any]:
        service = TransactionService(db, user_id=acting_user(x_user_id))
        return to_json(service.update_transaction(_entity_id(transaction_id), payload))

    @app.delete("/api/transactions/{transaction_id}", status_code=204)
    async def delete_transaction(
        transaction_id: str, x_user_id: Optional[str] = Header(None)
    ) -> Response:
        service = TransactionService(db, user_id=acting_user(x_user_id))
        service.delete_transaction(_entity_id(transaction_id))
        return Response(status_code=204)

    # Categories
    @app.get("/api/categories")
    async def list_categories(x_user_id: Optional[str] = Header(None)) -> list[dict[str, Any]]:
        service = CategoryService(db, user_id=acting_user(x_user_id))
        return to_json(service.list_categories())

    @app.post("/api/categories", status_code=201)
    async def create_category(
        payload: dict[str, Any] = Body(...), x_user_id: Optional[str] = Header(None)
    ) -> dict[str, Any]:
        service = CategoryService(db, user_id=acting_user(x_user_id))
        return to_json(service.create_category(payload))

    @app.patch("/api/categories/{category_id}")
    async def update_category(
        category_id: str,
        payload: dict[str, Any] = Body(...),
        x_user_id: Optional[str] = Header(None),
    ) -> dict[str, Any]:
        service = CategoryService(db, user_id=acting_user(x_user_id))
        return to_json(service.update_category(_entity_id(category_id), payload))

    @app.delete("/api/categories/{category_id}", status_code=204)
    async def delete_category(
        category_id: str, x_user_id: Optional[str] = Header(None)
    ) -> Response:
        service = CategoryService(db, user_id=acting_user(x_user_id))
        service.delete_category(_entity_id(category_id))
        return Response(status_code=204)

    # Credit cards
    @app.get("/api/cards")
    async def list_cards(x_user_id: Optional[str] = Header(None)) -> list[dict[str, Any]]:
        service = CardService(db, user_id=acting_user(x_user_id))
        return to_json(service.list_cards())

    @app.post("/api/cards", status_code=201)
    async def create_card(
        payload: dict[str, Any] = Body(...), x_user_id: Optional[str] = Header(None)
    ) -> dict[str, Any]:
        service = CardService(db, user_id=acting_user(x_user_id))
        return to_json(service.create_card(payload))

    @app.patch("/api/cards/{card_id}")
    async def update_card(
        card_id: str,
        payload: dict[str, Any] = Body(...),
        x_user_id: Optional[str] = Header(None),
    ) -> dict[str, Any]:
        service = CardService(db, user_id=acting_user(x_user_id))
        return to_json(service.update_card(_entity_id(card_id), payload))

    @app.delete("/api/cards/{card_id}", status_code=204)
    async def delete_card(card_id: str, x_user_id: Optional[str] = Header(None)) -> Response:
        service = CardService(db, user_id=acting_user(x_user_id))
        service.delete_card(_entity_id(card_id))
        return Response(status_code=204)

    # Family members
    @app.get("/api/family-members")
    async def list_family_members(
        x_user_id: Optional[str] = Header(None),
    ) -> list[dict[str, Any]]:
        service = FamilyMemberService(db, user_id=acting_user(x_user_id))
        return to_json(service.list_members())

    @app.post("/api/family-members", status_code=201)
    async def create_family_member(
        payload: dict[str, Any] = Body(...), x_user_id: Optional[str] = Header(None)
    ) -> dict[str, Any]:
        service = FamilyMemberService(db, user_id=acting_user(x_user_id))
        return to_json(service.create_member(payload))

    @app.patch("/api/family-members/{member_id}")
    async def update_family_member(
        member_id: str,
        payload: dict[str, Any] = Body(...),
        x_user_id: Optional[str] = Header(None),
    ) -> dict[str, Any]:
        service = FamilyMemberService(db, user_id=acting_user(x_user_id))
        return to_json(service.update_member(_entity_id(member_id), payload))

    @app.delete("/api/family-members/{member_id}", status_code=204)
    async def delete_family_member(
        member_id: str, x_user_id: Optional[str] = Header(None)
    ) -> Response:
        service = FamilyMemberService(db, user_id=acting_user(x_user_id))
        service.delete_member(_entity_id(member_id))
        return Response(status_code=204)

    # Statement import
    @app.post("/api/import/extract")
    async def extract_statement(
        payload: dict[str, Any] = Body(...), x_user_id: Optional[str] = Header(None)
    ) -> dict[str, Any]:
        """Parse statement text into reviewable drafts without saving anything.

        Optional ``cardId`` and ``familyMemberId`` keys in the body are applied
        to every draft.
        """
        service = StatementImportService(db, user_id=acting_user(x_user_id))
        card_id = payload.get("cardId")
        member_id = payload.get("familyMemberId")
        preview = service.extract(
            payload,
            card_id=_entity_id(card_id) if card_id else None,
            family_member_id=_entity_id(member_id) if member_id else None,
        )
        return {
            "transactions": to_json(preview.drafts),
            "bank": preview.result.bank,
            "statementType": preview.result.statement_type,
            "metadata": to_json(preview.result.metadata),
        }

    @app.post("/api/import/commit", status_code=201)
    async def commit_statement(
        payload: dict[str, Any] = Body(...), x_user_id: Optional[str] = Header(None)
    ) -> list[dict[str, Any]]:
        """Save reviewed drafts in one batch."""
        service = StatementImportService(db, user_id=acting_user(x_user_id))
        return to_json(service.commit(payload.get("transactions") or []))

    LOGGER.info("famfin API ready on %s backend", type(db).__name__)
    return app
