# tests/core/document/test_model.py
"""
Testes do modelo em memória do documento (Section e SettingsRoot).

Os testes asseguram que:
- seções ausentes são entregues como seções vazias, nunca `None`
- substituir preserva a posição; inserir anexa ao final
- seções entregues são cópias independentes da raiz
- o Version Stamp só muda via `stamp()`
"""

import pytest

from atlas_settings.core.document.model import DEFAULT_ROOT_TAG, Section, SettingsRoot
from atlas_settings.core.document.version import BuildIdentity
from atlas_settings.core.errors import InvalidSectionNameError


def test_empty_root():
    root = SettingsRoot()
    assert root.tag == DEFAULT_ROOT_TAG
    assert root.version is None
    assert len(root) == 0
    assert root.to_document() == {DEFAULT_ROOT_TAG: {"sections": {}}}


def test_missing_section_is_fresh_and_empty():
    root = SettingsRoot()
    sec = root.section("DisplaySettings")
    assert sec.name == "DisplaySettings"
    assert sec.payload == {}
    assert sec.is_empty
    assert root.get("DisplaySettings") is None
    # leitura não cria a seção
    assert "DisplaySettings" not in root


def test_put_replaces_in_place_and_appends_new():
    root = SettingsRoot(sections={"a": {"v": 1}, "b": {"v": 2}, "c": {"v": 3}})

    assert root.put(Section("b", {"v": 20})) is True
    assert root.put(Section("d", {"v": 4})) is False

    assert root.section_names() == ["a", "b", "c", "d"]
    assert root.section("b").payload == {"v": 20}


def test_put_twice_keeps_single_section():
    root = SettingsRoot()
    root.put(Section("s", {"x": 1}))
    root.put(Section("s", {"x": 1}))
    assert root.section_names() == ["s"]


def test_remove():
    root = SettingsRoot(sections={"a": {}, "b": {}})
    assert root.remove("a") is True
    assert root.remove("a") is False
    assert root.section_names() == ["b"]


def test_sections_are_copies():
    payload = {"nested": {"items": [1, 2]}}
    root = SettingsRoot()
    root.put(Section("s", payload))

    payload["nested"]["items"].append(3)
    assert root.section("s").payload == {"nested": {"items": [1, 2]}}

    got = root.section("s")
    got.payload["nested"]["items"].clear()
    assert root.section("s").payload == {"nested": {"items": [1, 2]}}


def test_stamp_overwrites_version():
    root = SettingsRoot(version="0.0.0.1")
    root.stamp(BuildIdentity(1, 2, 3, 4))
    assert root.version == "1.2.3.4"
    assert root.to_document()[DEFAULT_ROOT_TAG]["version"] == "1.2.3.4"


def test_extra_attributes_round_trip_through_document():
    root = SettingsRoot("App", version="1.0.0.0", sections={"s": {"k": "v"}}, attributes={"origin": "legacy"})
    assert root.to_document() == {
        "App": {"version": "1.0.0.0", "origin": "legacy", "sections": {"s": {"k": "v"}}}
    }
    assert root.copy() == root


def test_iteration_yields_sections():
    root = SettingsRoot(sections={"a": {"x": 1}, "b": None})
    assert [(s.name, s.payload) for s in root] == [("a", {"x": 1}), ("b", {})]


@pytest.mark.parametrize("bad", ["", None, 3])
def test_invalid_section_name(bad):
    with pytest.raises(InvalidSectionNameError):
        Section(bad)


def test_put_requires_section():
    with pytest.raises(TypeError):
        SettingsRoot().put({"name": "x"})  # type: ignore[arg-type]
