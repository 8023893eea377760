import pytest

from tabline_engine.keymaps import (
    ActionRef,
    Binding,
    KeymapConflictError,
    KeymapRegistry,
    KeySequence,
    KeyStroke,
    default_bindings,
)


def make_action(action_id: str = "tabline.test") -> ActionRef:
    return ActionRef(id=action_id, handler=lambda *args, **kwargs: None)


def make_binding(
    *,
    binding_id: str,
    mode: str = "normal",
    key: str = "tab",
    action_id: str = "tabline.test",
) -> Binding:
    return Binding(
        id=binding_id,
        mode=mode,
        sequence=KeySequence.from_strings(key),
        action_id=action_id,
    )


def test_register_binding_success() -> None:
    registry = KeymapRegistry()
    registry.register_action(make_action())

    registry.register_binding(make_binding(binding_id="next"))

    stats = registry.stats()
    assert stats.action_count == 1
    assert stats.binding_count == 1
    assert stats.modes == ("normal",)


def test_register_binding_requires_action() -> None:
    registry = KeymapRegistry()

    with pytest.raises(KeyError):
        registry.register_binding(make_binding(binding_id="next"))


def test_register_action_twice_without_replace() -> None:
    registry = KeymapRegistry()
    registry.register_action(make_action())

    with pytest.raises(ValueError):
        registry.register_action(make_action())


def test_conflicting_binding_raises() -> None:
    registry = KeymapRegistry()
    registry.register_action(make_action())
    registry.register_binding(make_binding(binding_id="first"))

    with pytest.raises(KeymapConflictError) as exc_info:
        registry.register_binding(make_binding(binding_id="second"))

    assert [b.id for b in exc_info.value.conflicts] == ["first"]


def test_conflicting_binding_replaced() -> None:
    registry = KeymapRegistry()
    registry.register_action(make_action())
    registry.register_binding(make_binding(binding_id="first"))

    registry.register_binding(make_binding(binding_id="second"), replace=True)

    assert [b.id for b in registry.iter_bindings()] == ["second"]


def test_same_key_in_other_mode_is_not_a_conflict() -> None:
    registry = KeymapRegistry()
    registry.register_action(make_action())
    registry.register_binding(make_binding(binding_id="first"))

    registry.register_binding(make_binding(binding_id="second", mode="insert"))

    assert registry.stats().modes == ("insert", "normal")


def test_lookup_normalizes_modifier_order() -> None:
    registry = KeymapRegistry()
    action = make_action()
    registry.register_action(action)
    registry.register_binding(make_binding(binding_id="close", key="alt+shift+c"))

    assert registry.lookup("normal", ("shift+alt+C",)) is action
    assert registry.lookup("normal", ("c",)) is None
    assert registry.lookup("visual", ("alt+shift+c",)) is None


def test_unregister_action_drops_bindings() -> None:
    registry = KeymapRegistry()
    registry.register_action(make_action())
    registry.register_binding(make_binding(binding_id="next"))

    removed = registry.unregister_action("tabline.test")

    assert removed is not None
    assert registry.stats().binding_count == 0
    assert registry.lookup("normal", ("tab",)) is None


def test_unregister_binding() -> None:
    registry = KeymapRegistry()
    registry.register_action(make_action())
    binding = make_binding(binding_id="next")
    registry.register_binding(binding)

    assert registry.unregister_binding("next") == binding
    assert registry.unregister_binding("next") is None


def test_keystroke_parse() -> None:
    stroke = KeyStroke.parse("Shift+Tab")

    assert stroke.key == "tab"
    assert stroke.modifiers == ("shift",)
    assert stroke.token == "shift+tab"


def test_default_bindings() -> None:
    tokens = {b.action_id: b.key_signature for b in default_bindings()}

    assert tokens == {
        "tabline.next": "tab",
        "tabline.previous": "shift+tab",
        "tabline.close_current": "alt+c",
    }


def test_action_ref_validation() -> None:
    with pytest.raises(ValueError):
        ActionRef(id="", handler=lambda: None)
    with pytest.raises(TypeError):
        ActionRef(id="x", handler="not callable")  # type: ignore[arg-type]
