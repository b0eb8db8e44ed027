"""
Tests for the Event System (Observer Pattern)
"""

import pytest
from datetime import datetime
from decimal import Decimal
from unittest.mock import Mock

from microloans import config as config_module
from microloans.events import (
    DomainEvent, EventPayload, EventDispatcher,
    get_global_dispatcher, set_global_dispatcher
)
from microloans.loans import Loan


class TestEventPayload:
    """Test EventPayload creation and serialization"""

    def test_event_payload_creation(self):
        event = EventPayload(
            event_type=DomainEvent.LOAN_PAYMENT,
            entity_type="loan",
            entity_id="loan-123",
            data={"amount": "100.00"}
        )

        assert event.event_type == DomainEvent.LOAN_PAYMENT
        assert event.entity_id == "loan-123"
        assert isinstance(event.timestamp, datetime)
        assert len(event.event_id) > 0

    def test_to_dict(self):
        event = EventPayload(DomainEvent.LOAN_PAID_OFF, "loan", "loan-1", {"paid_on": "2026-02-01"})
        data = event.to_dict()

        assert data["event_type"] == "loan.paid_off"
        assert data["data"] == {"paid_on": "2026-02-01"}
        assert data["timestamp"] == event.timestamp.isoformat()


class TestEventDispatcher:
    """Test publish/subscribe behaviour"""

    def test_subscribe_and_publish(self):
        dispatcher = EventDispatcher()
        handler = Mock()
        dispatcher.subscribe(DomainEvent.LOAN_PAYMENT, handler)

        event = EventPayload(DomainEvent.LOAN_PAYMENT, "loan", "1", {})
        dispatcher.publish(event)
        dispatcher.publish(EventPayload(DomainEvent.LOAN_OVERDUE, "loan", "1", {}))

        handler.assert_called_once_with(event)

    def test_global_handlers_receive_everything(self):
        dispatcher = EventDispatcher()
        received = []
        dispatcher.subscribe_all(received.append)

        dispatcher.publish(EventPayload(DomainEvent.LOAN_CREATED, "loan", "1", {}))
        dispatcher.publish(EventPayload(DomainEvent.LOAN_OVERDUE, "loan", "1", {}))

        assert [e.event_type for e in received] == [DomainEvent.LOAN_CREATED, DomainEvent.LOAN_OVERDUE]

    def test_unsubscribe(self):
        dispatcher = EventDispatcher()
        handler = Mock()
        dispatcher.subscribe(DomainEvent.LOAN_PAYMENT, handler)
        dispatcher.unsubscribe(DomainEvent.LOAN_PAYMENT, handler)
        # Unknown handler is tolerated
        dispatcher.unsubscribe(DomainEvent.LOAN_PAYMENT, handler)

        dispatcher.publish(EventPayload(DomainEvent.LOAN_PAYMENT, "loan", "1", {}))

        handler.assert_not_called()
        assert dispatcher.get_handler_count() == 0

    def test_failing_handler_does_not_break_others(self, caplog):
        dispatcher = EventDispatcher()
        good = Mock()
        dispatcher.subscribe(DomainEvent.LOAN_PAYMENT, Mock(side_effect=RuntimeError("boom")))
        dispatcher.subscribe(DomainEvent.LOAN_PAYMENT, good)

        dispatcher.publish(EventPayload(DomainEvent.LOAN_PAYMENT, "loan", "1", {}))

        good.assert_called_once()
        assert any("boom" in message for message in caplog.messages)

    def test_failing_handler_does_not_undo_payment(self):
        dispatcher = EventDispatcher()
        dispatcher.subscribe(DomainEvent.LOAN_PAYMENT, Mock(side_effect=RuntimeError("boom")))
        loan = Loan(Decimal('100'), "2026-01-01", dispatcher=dispatcher)

        assert loan.record_payment(Decimal('30')).success
        assert loan.outstanding_balance.amount == Decimal('70.00')

    def test_handler_counts(self):
        dispatcher = EventDispatcher()
        dispatcher.subscribe(DomainEvent.LOAN_PAYMENT, Mock())
        dispatcher.subscribe(DomainEvent.LOAN_PAYMENT, Mock())
        dispatcher.subscribe_all(Mock())

        assert dispatcher.get_handler_count(DomainEvent.LOAN_PAYMENT) == 2
        assert dispatcher.get_handler_count() == 3

        dispatcher.clear()
        assert dispatcher.get_handler_count() == 0


class TestGlobalDispatcher:

    def test_loan_without_dispatcher_uses_global(self):
        dispatcher = EventDispatcher()
        created = []
        dispatcher.subscribe(DomainEvent.LOAN_CREATED, created.append)
        set_global_dispatcher(dispatcher)
        try:
            assert get_global_dispatcher() is dispatcher
            Loan(Decimal('10'), "2026-01-01")
        finally:
            set_global_dispatcher(None)

        assert len(created) == 1
        assert get_global_dispatcher() is not dispatcher

    def test_events_can_be_disabled(self, monkeypatch):
        monkeypatch.setattr(config_module.config, "enable_events", False)
        dispatcher = EventDispatcher()
        handler = Mock()
        dispatcher.subscribe_all(handler)

        loan = Loan(Decimal('10'), "2026-01-01", dispatcher=dispatcher)
        loan.record_payment(Decimal('10'))

        handler.assert_not_called()
