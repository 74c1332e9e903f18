import pytest

from paper_engine.keymaps import (
    DEFAULT_BINDINGS,
    ActionRef,
    Binding,
    KeymapConflictError,
    KeymapRegistry,
    load_default_keymaps,
)
from paper_engine.modes import ModeName


def make_action(action_id: str = "core.test") -> ActionRef:
    return ActionRef(id=action_id, handler=lambda *args, **kwargs: None)


def make_binding(
    *,
    binding_id: str,
    mode: str = "display",
    key: str = "x",
    action_id: str = "core.test",
) -> Binding:
    return Binding(id=binding_id, mode=mode, key=key, action_id=action_id)


def test_register_binding_success() -> None:
    registry = KeymapRegistry()
    action = make_action()
    registry.register_action(action)
    binding = make_binding(binding_id="display.x")

    registry.register_binding(binding)

    assert registry.stats().binding_count == 1
    assert list(registry.iter_bindings(mode="display")) == [binding]


def test_register_binding_conflict_detection() -> None:
    registry = KeymapRegistry()
    registry.register_action(make_action())

    binding = make_binding(binding_id="display.x")
    registry.register_binding(binding)

    with pytest.raises(KeymapConflictError):
        registry.register_binding(make_binding(binding_id="display.x.duplicate"))


def test_same_key_in_other_mode_does_not_conflict() -> None:
    registry = KeymapRegistry()
    registry.register_action(make_action())

    registry.register_binding(make_binding(binding_id="display.x"))
    registry.register_binding(make_binding(binding_id="filter.x", mode="filter"))

    assert registry.stats().modes == ("display", "filter")


def test_replace_binding_takes_over_key() -> None:
    registry = KeymapRegistry()
    registry.register_action(make_action())
    registry.register_action(make_action("core.other"))
    registry.register_binding(make_binding(binding_id="display.x"))
    revision = registry.revision()

    registry.register_binding(
        make_binding(binding_id="display.x2", action_id="core.other"), replace=True
    )

    match = registry.lookup("display", "x")
    assert match is not None
    assert match.action.id == "core.other"
    assert registry.revision() > revision
    with pytest.raises(KeyError):
        registry.get_binding("display.x")


def test_binding_requires_registered_action() -> None:
    registry = KeymapRegistry()

    with pytest.raises(KeyError):
        registry.register_binding(make_binding(binding_id="display.x"))


def test_lookup_miss_returns_none() -> None:
    registry = KeymapRegistry()
    registry.register_action(make_action())
    registry.register_binding(make_binding(binding_id="display.x"))

    assert registry.lookup("display", "y") is None
    assert registry.lookup("edit", "x") is None


def test_binding_mode_accepts_enum_member() -> None:
    binding = make_binding(binding_id="edit.x", mode=ModeName.EDIT)

    assert binding.mode == "edit"


def test_unregister_binding_frees_key() -> None:
    registry = KeymapRegistry()
    registry.register_action(make_action())
    registry.register_binding(make_binding(binding_id="display.x"))

    removed = registry.unregister_binding("display.x")

    assert removed is not None
    assert registry.lookup("display", "x") is None
    assert registry.unregister_binding("display.x") is None


def test_load_default_keymaps_covers_transition_keys() -> None:
    registry = KeymapRegistry()

    load_default_keymaps(registry)

    assert registry.stats().binding_count == len(DEFAULT_BINDINGS)
    expected = {
        ("display", "."): "core.enter_command",
        ("display", "#"): "core.enter_filter",
        ("display", "/"): "core.enter_filter",
        ("command", "ENTER"): "command.submit",
        ("filter", "TAB"): "filter.join",
        ("filter", "ENTER"): "filter.commit",
        ("action", "i"): "action.mark_starts",
        ("action", "I"): "action.mark_ends",
        ("edit", "ESC"): "core.exit_to_display",
    }
    for (mode, key), action_id in expected.items():
        match = registry.lookup(mode, key)
        assert match is not None
        assert match.action.id == action_id


def test_load_default_keymaps_filters_and_overrides() -> None:
    registry = KeymapRegistry()
    registry.register_action(make_action("custom.scroll"))

    load_default_keymaps(
        registry,
        exclude_bindings=["display.k"],
        per_mode_overrides={
            "display": [
                make_binding(
                    binding_id="display.custom_j", key="j", action_id="custom.scroll"
                )
            ]
        },
    )

    assert registry.lookup("display", "k") is None
    match = registry.lookup("display", "j")
    assert match is not None
    assert match.action.id == "custom.scroll"


def test_override_for_wrong_mode_is_rejected() -> None:
    registry = KeymapRegistry()

    with pytest.raises(ValueError):
        load_default_keymaps(
            registry,
            per_mode_overrides={"edit": [make_binding(binding_id="display.z")]},
        )
