"""Integration tests for the tax rate table editing session."""

from decimal import Decimal

import pytest

from shopdesk.application.tax_rate_table import (
    TaxRateTableController,
    rate_from_seed,
    rate_to_seed,
)
from shopdesk.domain.exceptions import (
    ConfirmationRequired,
    DuplicateRateError,
    EmptyCountryError,
    EntityNotFoundError,
    NegativeAmountError,
    SyncError,
)
from shopdesk.domain.model.tax_rate import TaxRateStatus
from shopdesk.domain.repository.tax_rate_gateway import NO_REGIONS, TaxRateSeed
from tests.fakes import FakeTaxRateGateway


def _seed(rate_id: str, country: str, region: str = "", amount: str = "5", status: str = "active"):
    return TaxRateSeed(
        id=rate_id,
        country_code=country,
        region_label=region,
        scope="country" if not region else "region",
        amount=Decimal(amount),
        status=status,
    )


def _setup():
    gateway = FakeTaxRateGateway(
        rates=[
            _seed("1", "FR", amount="20"),
            _seed("2", "US", "CA", amount="7.25"),
            _seed("3", "FR", amount="19", status="inactive"),
        ],
        regions={"US": {"CA": "California", "NY": "New York"}},
    )
    controller = TaxRateTableController(gateway)
    return gateway, controller, controller.open_session()


def _compose(controller, session, country, amount, region=""):
    controller.select_country(session, country)
    if region:
        controller.set_global(session, False)
        controller.set_region(session, region)
    controller.set_amount(session, amount)


class TestOpenSession:

    def test_hydrates_from_seed(self):
        _, _, session = _setup()

        rates = list(session.rates)

        assert [r.id for r in rates] == ["1", "2", "3"]
        assert rates[0].is_global is True
        assert rates[1].is_global is False
        assert rates[2].status == TaxRateStatus.INACTIVE
        assert session.dirty is False


class TestAddRate:

    def test_add_marks_session_dirty_and_resets_draft(self):
        _, controller, session = _setup()
        _compose(controller, session, "DE", "19")

        controller.add_rate(session)

        assert len(session.rates) == 4
        assert session.dirty is True
        assert session.warn_on_exit is True
        assert session.draft.country == ""

    def test_duplicate_rejected_and_session_clean(self):
        _, controller, session = _setup()
        _compose(controller, session, "FR", "5")

        with pytest.raises(DuplicateRateError):
            controller.add_rate(session)

        assert len(session.rates) == 3
        assert session.dirty is False
        assert session.draft.country == "FR"

    def test_empty_country_rejected(self):
        _, controller, session = _setup()
        controller.set_amount(session, "5")
        with pytest.raises(EmptyCountryError):
            controller.add_rate(session)

    def test_negative_rejected(self):
        _, controller, session = _setup()
        _compose(controller, session, "DE", "-1")
        with pytest.raises(NegativeAmountError):
            controller.add_rate(session)
        assert len(session.rates) == 3

    def test_zero_amount_abandoned_without_confirmation(self):
        _, controller, session = _setup()
        _compose(controller, session, "DE", "0")

        with pytest.raises(ConfirmationRequired):
            controller.add_rate(session)

        assert len(session.rates) == 3
        assert session.dirty is False

    def test_zero_amount_added_with_confirmation(self):
        _, controller, session = _setup()
        _compose(controller, session, "DE", "0")

        controller.add_rate(session, confirm_zero=True)

        assert len(session.rates) == 4

    def test_all_countries_rate(self):
        _, controller, session = _setup()
        _compose(controller, session, "all", "2")

        controller.add_rate(session)

        added = list(session.rates)[-1]
        assert (added.country, added.region, added.is_global) == ("", "", True)


class TestRegionLookup:

    def test_regions_loaded_for_country(self):
        _, controller, session = _setup()
        controller.select_country(session, "US")
        assert session.regions == {"CA": "California", "NY": "New York"}

    def test_no_regions_sentinel(self):
        _, controller, session = _setup()
        controller.select_country(session, "FR")
        assert session.regions == NO_REGIONS

    def test_switching_country_drops_previous_region(self):
        _, controller, session = _setup()
        controller.select_country(session, "US")
        controller.set_global(session, False)
        controller.set_region(session, "NY")
        controller.select_country(session, "DE")
        controller.set_amount(session, "19")

        controller.add_rate(session)

        added = list(session.rates)[-1]
        assert added.scope_label == "DE"
        assert added.is_global is True

    def test_failed_lookup_keeps_previous_regions(self):
        gateway, controller, session = _setup()
        controller.select_country(session, "US")
        gateway.fail = True

        with pytest.raises(SyncError):
            controller.select_country(session, "FR")

        assert session.regions == {"CA": "California", "NY": "New York"}
        assert len(session.rates) == 3


class TestRowActions:

    def test_activate_duplicate_rejected(self):
        _, controller, session = _setup()

        with pytest.raises(DuplicateRateError):
            controller.activate(session, "3")

        assert session.rates.get("3").status == TaxRateStatus.INACTIVE
        assert session.dirty is False

    def test_activate_after_deactivating_conflict(self):
        _, controller, session = _setup()

        controller.deactivate(session, "1")
        controller.activate(session, "3")

        assert session.rates.get("3").status == TaxRateStatus.ACTIVE
        assert session.dirty is True

    def test_deactivate_marks_dirty(self):
        _, controller, session = _setup()
        controller.deactivate(session, "2")
        assert session.dirty is True

    def test_remove(self):
        _, controller, session = _setup()
        controller.select(session, "2")

        controller.remove(session, "2")

        assert session.rates.get("2") is None
        assert session.selected == []
        assert session.dirty is True

    def test_unknown_rate(self):
        _, controller, session = _setup()
        with pytest.raises(EntityNotFoundError):
            controller.activate(session, "nope")


class TestSelectionAndBulk:

    def test_select_and_deselect(self):
        _, controller, session = _setup()

        controller.select(session, "1")
        controller.select(session, "1")
        assert session.selected == ["1"]
        assert session.rates.get("1").selected is True

        controller.select(session, "1", selected=False)
        assert session.selected == []
        assert session.rates.get("1").selected is False

    def test_select_all(self):
        _, controller, session = _setup()
        controller.select_all(session)
        assert session.selected == ["1", "2", "3"]
        controller.select_all(session, False)
        assert session.selected == []
        assert not any(r.selected for r in session.rates)

    def test_bulk_deactivate_then_refilter(self):
        _, controller, session = _setup()
        controller.select(session, "1")
        controller.select(session, "2")

        controller.bulk_apply(session, TaxRateStatus.INACTIVE)

        assert session.dirty is True
        assert controller.visible_rates(session) == []

    def test_bulk_activation_allows_duplicates(self):
        # Unlike activate(), bulk activation does not check for duplicates.
        _, controller, session = _setup()
        controller.select(session, "3")

        controller.bulk_apply(session, TaxRateStatus.ACTIVE)

        assert len(session.rates.where(country="FR", status=TaxRateStatus.ACTIVE)) == 2

    def test_bulk_with_nothing_selected_stays_clean(self):
        _, controller, session = _setup()
        controller.bulk_apply(session, TaxRateStatus.INACTIVE)
        assert session.dirty is False


class TestVisibleRates:

    def test_active_only_by_default(self):
        _, controller, session = _setup()
        rows = controller.visible_rates(session)
        assert [r.id for r in rows] == ["1", "2"]
        assert rows[1].scope == "US: CA"
        assert rows[1].amount == "7.25%"

    def test_show_all(self):
        _, controller, session = _setup()
        controller.set_show_all(session, True)
        assert [r.id for r in controller.visible_rates(session)] == ["1", "2", "3"]


class TestSave:

    def test_save_clears_dirty_and_assigns_ids(self):
        gateway, controller, session = _setup()
        _compose(controller, session, "DE", "19")
        controller.add_rate(session)

        controller.save(session)

        assert session.dirty is False
        assert session.warn_on_exit is False
        assert [r.id for r in session.rates] == ["1", "2", "3", "4"]
        assert gateway.saved[-1][-1].country_code == "DE"

    def test_failed_save_keeps_dirty_flag(self):
        gateway, controller, session = _setup()
        controller.deactivate(session, "2")
        gateway.fail = True

        with pytest.raises(SyncError):
            controller.save(session)

        assert session.dirty is True
        assert session.rates.get("2").status == TaxRateStatus.INACTIVE

    def test_failed_save_on_clean_session_stays_clean(self):
        gateway, controller, session = _setup()
        gateway.fail = True

        with pytest.raises(SyncError):
            controller.save(session)

        assert session.dirty is False


class TestSeedMapping:

    def test_country_scope_is_global(self):
        assert rate_from_seed(_seed("1", "FR")).is_global is True

    def test_round_trip_scopes(self):
        assert rate_to_seed(rate_from_seed(_seed("1", "US", "CA"))).scope == "region"
        assert rate_to_seed(rate_from_seed(_seed("1", "FR"))).scope == "country"
        seed = TaxRateSeed("9", "", "", "global", Decimal("1"), "active")
        assert rate_to_seed(rate_from_seed(seed)).scope == "global"
