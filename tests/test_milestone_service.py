"""Tests for the milestone catalog and its admin lifecycle."""
from decimal import Decimal

import pytest

from cartrewards.models import Milestone, MilestoneStatus, RewardType
from cartrewards.services import MilestoneService, StoreService, ValidationError, NotFoundError


def create(db, store, threshold, reward_type=RewardType.FREE_PRODUCTS, **extra):
    data = {"threshold_amount": Decimal(threshold), "reward_type": reward_type}
    data.update(extra)
    return MilestoneService.create_milestone(db, store.id, data)


class TestCatalogQueries:

    def test_active_milestones_sorted_by_threshold(self, db, store):
        create(db, store, "5000")
        create(db, store, "2500", RewardType.FREE_DELIVERY)
        create(db, store, "3000")

        thresholds = [m.threshold_amount for m in MilestoneService.list_active_milestones(db, store.id)]

        assert thresholds == [Decimal("2500"), Decimal("3000"), Decimal("5000")]

    def test_equal_thresholds_keep_insertion_order(self, db, store):
        first = create(db, store, "3000", name="first")
        second = create(db, store, "3000", name="second")
        third = create(db, store, "3000", name="third")

        ids = [m.id for m in MilestoneService.list_active_milestones(db, store.id)]

        assert ids == [first.id, second.id, third.id]

    def test_equal_created_at_still_keeps_insertion_order(self, db, store):
        # ids sort opposite to insertion, so only the sequence column can order these
        first = create(db, store, "3000", id="ffffffff-0000-0000-0000-000000000000")
        second = create(db, store, "3000", id="00000000-0000-0000-0000-000000000000")
        stamp = first.created_at
        db.query(Milestone).filter(Milestone.store_id == store.id).update({"created_at": stamp})
        db.commit()

        active = [m.id for m in MilestoneService.list_active_milestones(db, store.id)]
        listed = [m.id for m in MilestoneService.list_by_status(db, store.id)]

        assert active == listed == [first.id, second.id]
        assert second.sequence > first.sequence

    def test_duplicate_goes_after_existing_ties(self, db, store):
        original = create(db, store, "3000")
        other = create(db, store, "3000")
        copy = MilestoneService.duplicate_milestone(db, original.id)

        ids = [m.id for m in MilestoneService.list_active_milestones(db, store.id)]

        assert ids == [original.id, other.id, copy.id]

    def test_sequence_is_per_store(self, db, store):
        other = StoreService.create_store(db, "other.myshopify.com", "Other", "token")
        assert create(db, store, "100").sequence == 1
        assert create(db, other, "100").sequence == 1
        assert create(db, store, "50").sequence == 2

    def test_list_by_status_unknown_store(self, db):
        with pytest.raises(NotFoundError):
            MilestoneService.list_by_status(db, "missing-store")

    def test_catalog_is_store_scoped(self, db, store):
        other = StoreService.create_store(db, "other.myshopify.com", "Other", "token")
        create(db, other, "100")
        create(db, store, "200")

        milestones = MilestoneService.list_active_milestones(db, store.id)

        assert [m.store_id for m in milestones] == [store.id]

    def test_default_listing_hides_deleted(self, db, store, ladder):
        MilestoneService.pause_milestone(db, ladder["3000"].id)
        MilestoneService.soft_delete_milestone(db, ladder["4000"].id)

        listed = MilestoneService.list_by_status(db, store.id)

        assert ladder["4000"].id not in {m.id for m in listed}
        assert ladder["3000"].id in {m.id for m in listed}
        assert len(listed) == 3

    def test_list_by_status(self, db, store, ladder):
        MilestoneService.pause_milestone(db, ladder["3000"].id)
        MilestoneService.soft_delete_milestone(db, ladder["4000"].id)

        assert [m.id for m in MilestoneService.list_by_status(db, store.id, "paused")] == [ladder["3000"].id]
        assert [m.id for m in MilestoneService.list_by_status(db, store.id, "deleted")] == [ladder["4000"].id]
        assert len(MilestoneService.list_by_status(db, store.id, "active")) == 2

    def test_unknown_status_filter(self, db, store):
        with pytest.raises(ValidationError):
            MilestoneService.list_by_status(db, store.id, "archived")


class TestCreateValidation:

    def test_negative_threshold(self, db, store):
        with pytest.raises(ValidationError):
            create(db, store, "-0.01")

    @pytest.mark.parametrize("threshold", ["2999.999", "100000000"])
    def test_threshold_must_fit_currency_column(self, db, store, threshold):
        with pytest.raises(ValidationError):
            create(db, store, threshold)

    def test_zero_threshold_is_allowed(self, db, store):
        milestone = create(db, store, "0", RewardType.FREE_DELIVERY)
        assert milestone.threshold_amount == Decimal("0")

    def test_missing_reward_type(self, db, store):
        with pytest.raises(ValidationError):
            MilestoneService.create_milestone(db, store.id, {"threshold_amount": Decimal("100")})

    def test_unknown_reward_type(self, db, store):
        with pytest.raises(ValidationError):
            create(db, store, "100", reward_type="cashback")

    def test_negative_free_product_count(self, db, store):
        with pytest.raises(ValidationError):
            create(db, store, "100", free_product_count=-1)

    def test_unknown_store(self, db):
        with pytest.raises(NotFoundError):
            MilestoneService.create_milestone(db, "nope", {
                "threshold_amount": Decimal("100"), "reward_type": RewardType.DISCOUNT
            })

    def test_new_milestones_start_active(self, db, store):
        milestone = create(db, store, "100", RewardType.DISCOUNT, discount_value=Decimal("10"), discount_type="fixed")
        assert milestone.status == MilestoneStatus.ACTIVE.value
        assert milestone.discount_type == "fixed"


class TestLifecycle:

    def test_pause_and_resume(self, db, ladder):
        milestone_id = ladder["3000"].id

        paused = MilestoneService.pause_milestone(db, milestone_id, modified_by="admin")
        assert paused.status == "paused"
        assert paused.last_modified_by == "admin"

        resumed = MilestoneService.resume_milestone(db, milestone_id)
        assert resumed.status == "active"

    def test_soft_delete_keeps_row(self, db, ladder):
        deleted = MilestoneService.soft_delete_milestone(db, ladder["2500"].id)
        assert deleted.status == "deleted"
        assert MilestoneService.get_milestone(db, ladder["2500"].id).status == "deleted"

    def test_update_fields(self, db, ladder):
        updated = MilestoneService.update_milestone(db, ladder["3000"].id, {
            "threshold_amount": "3500",
            "free_product_count": 2,
            "name": None,
            "modified_by": "editor",
        })
        assert updated.threshold_amount == Decimal("3500")
        assert updated.free_product_count == 2
        assert updated.name == "3000 reward"
        assert updated.last_modified_by == "editor"

    def test_update_rejects_negative_threshold(self, db, ladder):
        with pytest.raises(ValidationError):
            MilestoneService.update_milestone(db, ladder["3000"].id, {"threshold_amount": Decimal("-5")})

    def test_duplicate_copies_fields_but_not_usage(self, db, store, ladder):
        source = ladder["4000"]
        source.usage_count = 7
        source.usage_limit = 50
        db.commit()

        copy = MilestoneService.duplicate_milestone(db, source.id, new_name="VIP ladder")

        assert copy.id != source.id
        assert copy.name == "VIP ladder"
        assert copy.usage_count == 0
        assert copy.usage_limit == 50
        assert copy.threshold_amount == source.threshold_amount
        assert copy.reward_type == source.reward_type
        assert copy.free_product_count == source.free_product_count
        assert copy.store_id == store.id

    def test_duplicate_default_name(self, db, ladder):
        copy = MilestoneService.duplicate_milestone(db, ladder["2500"].id)
        assert copy.name == "2500 reward (Copy)"

    @pytest.mark.parametrize("operation", [
        MilestoneService.pause_milestone,
        MilestoneService.resume_milestone,
        MilestoneService.soft_delete_milestone,
        MilestoneService.duplicate_milestone,
    ])
    def test_unknown_milestone(self, db, store, operation):
        with pytest.raises(NotFoundError):
            operation(db, "does-not-exist")

    def test_store_scope_is_enforced(self, db, ladder):
        other = StoreService.create_store(db, "other.myshopify.com", "Other", "token")
        with pytest.raises(NotFoundError):
            MilestoneService.pause_milestone(db, ladder["2500"].id, store_id=other.id)

    def test_initialize_default_milestones(self, db, store):
        created = MilestoneService.initialize_default_milestones(db, store.id)

        assert [m.threshold_amount for m in created] == [Decimal(v) for v in ("2500", "3000", "4000", "5000")]
        assert [m.reward_type for m in created] == ["free_delivery", "free_products", "free_products", "free_products"]
        assert [m.free_product_count for m in created] == [0, 1, 2, 3]
