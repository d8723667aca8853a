"""Tests for Item, Stage and Connector models."""

import pytest

from stagegraph.errors import InvalidTransitionError, NotFoundError
from stagegraph.models import Connector, Item, ItemRole, Stage, StageRole


class TestItem:
    """Tests for Item."""

    def test_generates_id_automatically(self) -> None:
        item = Item.junction()

        assert item.id
        assert item.role == ItemRole.JUNCTION

    def test_generated_ids_are_unique(self) -> None:
        ids = {Item.step().id for _ in range(50)}
        assert len(ids) == 50

    def test_caller_supplied_id(self) -> None:
        item = Item.step("review")
        assert item.id == "review"
        assert item.role == ItemRole.STAGE

    def test_equality_uses_id_only(self) -> None:
        assert Item.create(ItemRole.STAGE, "x") == Item.create(ItemRole.JUNCTION, "x")
        assert Item.step("x") != Item.step("y")
        assert len({Item.step("x"), Item.step("x")}) == 1

    def test_is_immutable(self) -> None:
        item = Item.step("x")
        with pytest.raises(AttributeError):
            item.id = "y"  # type: ignore[misc]


class TestStage:
    """Tests for Stage role constraints."""

    def test_start_stage_holds_single_start_item(self) -> None:
        stage = Stage.start()

        assert stage.role == StageRole.START
        assert [item.role for item in stage.items] == [ItemRole.START]
        assert stage.is_terminal

    def test_start_stage_rejects_second_item(self) -> None:
        stage = Stage.start()
        with pytest.raises(InvalidTransitionError):
            stage.add_item(Item.start())
        assert stage.item_count == 1

    def test_end_stage_rejects_step_items(self) -> None:
        stage = Stage(role=StageRole.END)
        with pytest.raises(InvalidTransitionError):
            stage.add_item(Item.step("a"))
        assert not stage.has_items

    def test_separator_holds_at_most_one_junction(self) -> None:
        stage = Stage.separator()
        junction = Item.junction()
        stage.add_item(junction)

        assert stage.junction == junction
        with pytest.raises(InvalidTransitionError):
            stage.add_item(Item.junction())

    def test_separator_rejects_step_items(self) -> None:
        with pytest.raises(InvalidTransitionError):
            Stage.separator().add_item(Item.step("a"))

    def test_workflow_stage_keeps_item_order(self) -> None:
        stage = Stage.workflow()
        for item_id in ("a", "b", "c"):
            stage.add_item(Item.step(item_id))

        assert [item.id for item in stage.items] == ["a", "b", "c"]
        assert stage.item_count == 3
        assert stage.contains("b")

    def test_workflow_stage_rejects_same_item_twice(self) -> None:
        stage = Stage.workflow()
        stage.add_item(Item.step("a"))
        with pytest.raises(InvalidTransitionError):
            stage.add_item(Item.step("a"))

    def test_remove_item(self) -> None:
        stage = Stage.workflow()
        stage.add_item(Item.step("a"))
        stage.add_item(Item.step("b"))

        stage.remove_item(Item.step("a"))

        assert [item.id for item in stage.items] == ["b"]

    def test_remove_missing_item_raises_not_found(self) -> None:
        stage = Stage.workflow()
        stage.add_item(Item.step("a"))
        with pytest.raises(NotFoundError):
            stage.remove_item(Item.step("zzz"))
        assert stage.item_count == 1

    def test_items_are_read_only(self) -> None:
        stage = Stage.workflow()
        stage.add_item(Item.step("a"))

        assert isinstance(stage.items, tuple)
        assert stage.junction is None

    def test_stages_compare_by_identity(self) -> None:
        assert Stage.separator() != Stage.separator()


class TestConnector:
    """Tests for Connector."""

    def test_key_and_touches(self) -> None:
        connector = Connector(Item.step("a"), Item.step("b"))

        assert connector.key == ("a", "b")
        assert connector.touches("a")
        assert connector.touches("b")
        assert not connector.touches("c")

    def test_equality_by_endpoint_ids(self) -> None:
        assert Connector(Item.step("a"), Item.step("b")) == Connector(Item.step("a"), Item.step("b"))
        assert Connector(Item.step("a"), Item.step("b")) != Connector(Item.step("b"), Item.step("a"))
