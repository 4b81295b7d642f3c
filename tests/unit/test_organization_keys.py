"""Tests for the organization key schema."""

import pytest

from neo_confcache.core.exceptions import ArtifactIdInvalid
from neo_confcache.core.value_objects import OrganizationKeys


class TestOrganizationKeys:
    """Test key derivation and classification."""

    @pytest.fixture
    def keys(self):
        return OrganizationKeys("acme")

    def test_key_layout(self, keys):
        assert keys.prefix == "{acme}:"
        assert keys.artifact_key("cfg1") == "{acme}:cfg1"
        assert keys.provenance_key("cfg1") == "{acme}:template:cfg1"

    def test_provenance_keys_are_recognized(self, keys):
        assert keys.is_provenance_key("{acme}:template:cfg1")
        assert not keys.is_provenance_key("{acme}:cfg1")

    def test_id_from_key_strips_prefix(self, keys):
        assert keys.id_from_key("{acme}:nested:id") == "nested:id"

    def test_provenance_key_for(self, keys):
        assert keys.provenance_key_for("{acme}:cfg1") == "{acme}:template:cfg1"
        assert keys.provenance_key_for("{acme}:template:cfg1") is None
        assert keys.provenance_key_for("{other}:cfg1") is None

    def test_organizations_do_not_share_prefixes(self):
        """An organization named like another's prefix must not own its keys."""
        acme = OrganizationKeys("acme")
        acme_corp = OrganizationKeys("acme-corp")
        assert not acme.owns(acme_corp.artifact_key("cfg1"))
        assert not acme_corp.owns(acme.artifact_key("cfg1"))

    @pytest.mark.parametrize("organization", ["", "ac{me", "acme}"])
    def test_invalid_organization(self, organization):
        with pytest.raises(ValueError):
            OrganizationKeys(organization)

    def test_validate_id(self, keys):
        assert keys.validate_id("cfg1") == "cfg1"

        with pytest.raises(ArtifactIdInvalid) as exc_info:
            keys.validate_id("")
        assert exc_info.value.error_code == "ARTIFACT_ID_EMPTY"

        with pytest.raises(ArtifactIdInvalid) as exc_info:
            keys.validate_id("template:cfg1")
        assert exc_info.value.error_code == "ARTIFACT_ID_RESERVED"

    def test_artifact_key_for(self, keys):
        assert keys.artifact_key_for("{acme}:template:cfg1") == "{acme}:cfg1"
        assert keys.artifact_key_for("{acme}:cfg1") is None
