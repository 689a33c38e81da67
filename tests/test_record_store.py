"""
Tests for the ad_data_entries adapter.
"""

from datetime import date, datetime, timezone
from decimal import Decimal
from types import SimpleNamespace

import pytest
from pydantic import ValidationError

from src.schemas.ad_entry import AdEntryCreate, AdEntryUpdate
from src.services import record_store
from src.services.exceptions import UnknownOperatorError

AUG_1 = date(2025, 8, 1)


class TestToDailyEntry:
    def test_column_mapping(self):
        row = SimpleNamespace(
            date=AUG_1,
            staff="乔",
            ad_spend=Decimal("12.50"),
            credit_card_amount=Decimal("300.00"),
            credit_card_orders=4,
            payment_info_count=9,
        )
        entry = record_store.to_daily_entry(row)

        assert entry.operator == "乔"
        assert entry.date == AUG_1
        assert entry.ad_spend == Decimal("12.50")
        assert entry.credit_card_amount == Decimal("300.00")
        assert entry.order_count == 4

    def test_missing_numbers_count_as_zero(self):
        row = SimpleNamespace(
            date=AUG_1,
            staff="白",
            ad_spend=None,
            credit_card_amount=None,
            credit_card_orders=None,
        )
        entry = record_store.to_daily_entry(row)

        assert entry.ad_spend == Decimal("0")
        assert entry.credit_card_amount == Decimal("0")
        assert entry.order_count == 0

    def test_missing_date_rejected(self):
        row = SimpleNamespace(
            date=None,
            staff="白",
            ad_spend=Decimal("1"),
            credit_card_amount=Decimal("1"),
            credit_card_orders=1,
        )
        with pytest.raises(ValidationError):
            record_store.to_daily_entry(row)


class TestCheckOperator:
    def test_known_operator(self):
        record_store.check_operator("青")

    def test_unknown_operator(self):
        with pytest.raises(UnknownOperatorError) as exc_info:
            record_store.check_operator("张")
        assert exc_info.value.operator == "张"

    def test_explicit_roster(self):
        with pytest.raises(UnknownOperatorError):
            record_store.check_operator("青", roster=["乔"])


class TestQueries:
    @pytest.mark.asyncio
    async def test_list_entries_filters_and_orders(self, db_session, add_entry):
        await add_entry(AUG_1, "乔", orders=1)
        await add_entry(date(2025, 8, 2), "白", orders=2)
        await add_entry(date(2025, 8, 2), "乔", orders=3)
        await add_entry(date(2025, 9, 1), "乔", orders=4)

        rows = await record_store.list_entries(
            db_session, start=AUG_1, end=date(2025, 8, 31)
        )
        assert [(r.date.day, r.staff) for r in rows] == [(2, "乔"), (2, "白"), (1, "乔")]

        only_bai = await record_store.list_entries(db_session, operators=["白"])
        assert [r.staff for r in only_bai] == ["白"]

    @pytest.mark.asyncio
    async def test_fetch_entries_returns_canonical(self, db_session, add_entry):
        await add_entry(AUG_1, "乔", ad_spend="100", credit_card_amount="2000", orders=10)
        await add_entry(AUG_1, "青", ad_spend="50", credit_card_amount="10", orders=1)

        entries = await record_store.fetch_entries(db_session, AUG_1, AUG_1, ["乔"])

        assert len(entries) == 1
        assert entries[0].operator == "乔"
        assert entries[0].order_count == 10
        assert entries[0].ad_spend == Decimal("100")


class TestUpsert:
    @pytest.mark.asyncio
    async def test_create_then_overwrite(self, db_session):
        data = AdEntryCreate(date=AUG_1, staff="乔", ad_spend="10", credit_card_orders=2)
        entry, created = await record_store.upsert_entry(db_session, data)
        assert created is True

        data = AdEntryCreate(date=AUG_1, staff="乔", ad_spend="25", credit_card_orders=5)
        again, created = await record_store.upsert_entry(db_session, data)

        assert created is False
        assert again.id == entry.id
        assert again.ad_spend == Decimal("25")
        assert again.credit_card_orders == 5
        assert len(await record_store.list_entries(db_session)) == 1

    @pytest.mark.asyncio
    async def test_concurrent_insert_becomes_update(self, db_session, add_entry, monkeypatch):
        existing = await add_entry(AUG_1, "乔", ad_spend="10", orders=1)
        real_find = record_store._find_entry
        lookups = []

        async def find_after_other_insert(db, day, staff):
            # the first lookup runs before the other submission commits
            lookups.append(staff)
            if len(lookups) == 1:
                return None
            return await real_find(db, day, staff)

        monkeypatch.setattr(record_store, "_find_entry", find_after_other_insert)

        data = AdEntryCreate(date=AUG_1, staff="乔", ad_spend="30", credit_card_orders=4)
        entry, created = await record_store.upsert_entry(db_session, data)

        assert created is False
        assert entry.id == existing.id
        assert entry.ad_spend == Decimal("30")
        assert len(lookups) == 2
        assert len(await record_store.list_entries(db_session)) == 1

    def test_amount_beyond_column_rejected(self):
        with pytest.raises(ValidationError):
            AdEntryCreate(date=AUG_1, staff="乔", ad_spend=Decimal("12345678901234.567"))
        with pytest.raises(ValidationError):
            AdEntryCreate(date=AUG_1, staff="乔", credit_card_amount="1E30")
        with pytest.raises(ValidationError):
            AdEntryUpdate(credit_card_orders=2**31)

    @pytest.mark.asyncio
    async def test_unknown_operator_rejected(self, db_session):
        data = AdEntryCreate(date=AUG_1, staff="张")
        with pytest.raises(UnknownOperatorError):
            await record_store.upsert_entry(db_session, data)

    @pytest.mark.asyncio
    async def test_partial_update(self, db_session, add_entry):
        entry = await add_entry(AUG_1, "白", ad_spend="10", credit_card_amount="200", orders=1)

        await record_store.update_entry(
            db_session, entry, AdEntryUpdate(credit_card_orders=7)
        )

        assert entry.credit_card_orders == 7
        assert entry.ad_spend == Decimal("10")

    @pytest.mark.asyncio
    async def test_delete(self, db_session, add_entry):
        entry = await add_entry(AUG_1, "白")
        await record_store.delete_entry(db_session, entry)
        assert await record_store.get_entry(db_session, entry.id) is None


class TestLastUpdate:
    @pytest.mark.asyncio
    async def test_no_data(self, db_session):
        assert await record_store.get_last_update(db_session, AUG_1) is None

        check = await record_store.has_updates_since(db_session, AUG_1)
        assert check.has_update is True
        assert check.update_info is None

    @pytest.mark.asyncio
    async def test_reports_commission_operators(self, db_session, add_entry):
        await add_entry(AUG_1, "乔")
        await add_entry(AUG_1, "妹")
        await add_entry(AUG_1, "青")

        info = await record_store.get_last_update(db_session, AUG_1)

        assert info.record_count == 2
        assert info.operators == ["乔", "妹"]
        assert info.last_update.tzinfo is not None

    @pytest.mark.asyncio
    async def test_has_updates_since(self, db_session, add_entry):
        await add_entry(AUG_1, "乔")

        old = datetime(2000, 1, 1, tzinfo=timezone.utc)
        future = datetime(2999, 1, 1, tzinfo=timezone.utc)

        assert (await record_store.has_updates_since(db_session, AUG_1, old)).has_update
        assert not (await record_store.has_updates_since(db_session, AUG_1, future)).has_update
        # naive reference times are read as UTC
        assert (
            await record_store.has_updates_since(db_session, AUG_1, datetime(2000, 1, 1))
        ).has_update
