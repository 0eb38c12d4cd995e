"""Tests for the ledger audit trail."""

from datetime import datetime, timezone
from uuid import uuid4


class TestAuditAction:
    """Tests for AuditAction enum."""

    def test_has_create_update_delete(self):
        """AuditAction has required values."""
        from core.audit import AuditAction

        assert AuditAction.CREATE.value == "create"
        assert AuditAction.UPDATE.value == "update"
        assert AuditAction.DELETE.value == "delete"


class TestComputeChanges:
    """Tests for compute_changes utility function."""

    def test_detects_changed_fields(self):
        """Different values for same key detected."""
        from core.audit import compute_changes

        old = {"room_number": "101", "daily_rate_cents": 200000}
        new = {"room_number": "101", "daily_rate_cents": 250000}

        changes = compute_changes(old, new)

        assert changes == {"daily_rate_cents": {"old": 200000, "new": 250000}}

    def test_detects_added_fields(self):
        """New fields in 'new' dict detected."""
        from core.audit import compute_changes

        changes = compute_changes({"name": "Hamza"}, {"name": "Hamza", "phone": "0300"})

        assert changes["phone"] == {"old": None, "new": "0300"}

    def test_detects_removed_fields(self):
        """Fields in 'old' but not 'new' detected."""
        from core.audit import compute_changes

        changes = compute_changes({"name": "Hamza", "phone": "0300"}, {"name": "Hamza"})

        assert changes["phone"] == {"old": "0300", "new": None}

    def test_excludes_updated_at_by_default(self):
        """updated_at not reported as change."""
        from core.audit import compute_changes

        old = {"paid": True, "updated_at": datetime(2026, 3, 1, tzinfo=timezone.utc)}
        new = {"paid": True, "updated_at": datetime(2026, 3, 2, tzinfo=timezone.utc)}

        assert compute_changes(old, new) == {}

    def test_custom_exclude_fields(self):
        """Can exclude additional fields."""
        from core.audit import compute_changes

        old = {"paid": False, "paid_at": None}
        new = {"paid": True, "paid_at": "2026-03-01T09:00:00+00:00"}

        changes = compute_changes(old, new, exclude_fields={"updated_at", "paid_at"})

        assert "paid" in changes
        assert "paid_at" not in changes


class TestAuditLogger:
    """Tests for AuditLogger class."""

    def test_log_change_writes_through_pool(self, postgres):
        """Without a transaction the entry goes straight to the pool."""
        from core.audit import AuditLogger, AuditAction

        logger = AuditLogger(postgres)
        entity_id = uuid4()

        logger.log_change(
            entity_type="sale",
            entity_id=entity_id,
            action=AuditAction.CREATE,
            changes={"created": {"total_amount_cents": 50000}}
        )

        query, params = postgres.execute.call_args[0]
        assert "INSERT INTO audit_log" in query
        assert params[2] == "sale"
        assert params[3] == entity_id
        assert params[4] == "create"
        assert params[5].adapted == {"created": {"total_amount_cents": 50000}}

    def test_log_change_writes_through_transaction(self, postgres, tx):
        """Inside a transaction the entry commits with the mutation."""
        from core.audit import AuditLogger, AuditAction

        logger = AuditLogger(postgres)

        logger.log_change("payment", uuid4(), AuditAction.CREATE, {"created": {}}, tx=tx)

        tx.execute.assert_called_once()
        postgres.execute.assert_not_called()

    def test_log_change_uses_context_operator(self, postgres, as_cashier, cashier_id):
        """Defaults to the operator in context."""
        from core.audit import AuditLogger, AuditAction

        AuditLogger(postgres).log_change("guest", uuid4(), AuditAction.UPDATE, {})

        assert postgres.execute.call_args[0][1][1] == cashier_id

    def test_log_change_without_operator(self, postgres):
        """System writes with no operator store NULL."""
        from core.audit import AuditLogger, AuditAction

        AuditLogger(postgres).log_change("guest", uuid4(), AuditAction.UPDATE, {})

        assert postgres.execute.call_args[0][1][1] is None

    def test_log_change_explicit_user_overrides(self, postgres, as_cashier, manager_id):
        """Explicit user_id overrides context."""
        from core.audit import AuditLogger, AuditAction

        AuditLogger(postgres).log_change(
            entity_type="food_order",
            entity_id=uuid4(),
            action=AuditAction.UPDATE,
            changes={"paid": {"old": False, "new": True}},
            user_id=manager_id
        )

        assert postgres.execute.call_args[0][1][1] == manager_id

    def test_get_entity_history(self, postgres):
        """History is read newest first for one entity."""
        from core.audit import AuditLogger

        entity_id = uuid4()
        postgres.execute.return_value = [{"action": "update"}, {"action": "create"}]

        history = AuditLogger(postgres).get_entity_history("checkout", entity_id)

        assert [h["action"] for h in history] == ["update", "create"]
        query, params = postgres.execute.call_args[0]
        assert "ORDER BY created_at DESC" in query
        assert params == ("checkout", entity_id, 100)


class TestComputeChangesFromModels:
    """compute_changes accepts stored models directly."""

    def test_models_are_dumped_as_json(self):
        from core.audit import compute_changes
        from core.models import TaxConfig

        changes = compute_changes(
            TaxConfig(enabled=False, rate_bps=500),
            TaxConfig(enabled=True, rate_bps=500, updated_at=datetime(2026, 3, 1, tzinfo=timezone.utc)),
        )

        assert changes == {"enabled": {"old": False, "new": True}}

    def test_fields_in_name_order(self):
        from core.audit import compute_changes

        changes = compute_changes({"b": 1, "a": 1}, {"b": 2, "a": 2})

        assert list(changes) == ["a", "b"]
