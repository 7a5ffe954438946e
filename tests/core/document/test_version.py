# tests/core/document/test_version.py
import pytest

from atlas_settings import __version__
from atlas_settings.core.document.version import BuildIdentity, current_build_identity
from atlas_settings.core.errors import InvalidBuildIdentityError


def test_str_is_four_dotted_components():
    assert str(BuildIdentity(8, 2, 0, 7471)) == "8.2.0.7471"
    assert str(BuildIdentity(1)) == "1.0.0.0"


@pytest.mark.parametrize(
    "text, expected",
    [
        ("1", "1.0.0.0"),
        ("1.2", "1.2.0.0"),
        ("1.2.3", "1.2.3.0"),
        ("1.2.3.4", "1.2.3.4"),
        ("0.1.0rc1", "0.1.0.0"),
        ("2.0.1+local.7", "2.0.1.0"),
        ("0.1.0.dev1", "0.1.0.0"),
        ("0.1.dev3+g1234abc", "0.1.0.0"),
        ("1.0.post1", "1.0.0.0"),
        ("1.2.3.4.post2.dev5", "1.2.3.4"),
        (" 3.4 ", "3.4.0.0"),
    ],
)
def test_parse(text, expected):
    assert str(BuildIdentity.parse(text)) == expected


@pytest.mark.parametrize("text", ["", "x.y", "1.2.3.4.5", "1..2", "1.\u00b2", None])
def test_parse_invalid(text):
    with pytest.raises(InvalidBuildIdentityError):
        BuildIdentity.parse(text)


def test_negative_component_rejected():
    with pytest.raises(InvalidBuildIdentityError):
        BuildIdentity(1, -1)


def test_current_build_identity_follows_package_version():
    assert current_build_identity() == BuildIdentity.parse(__version__)
    assert str(current_build_identity()).count(".") == 3


def test_current_build_identity_accepts_development_versions(monkeypatch):
    from atlas_settings.core.document import version as version_module

    monkeypatch.setattr(version_module, "__version__", "0.2.0.dev4+g1a2b3c")
    assert str(version_module.current_build_identity()) == "0.2.0.0"
