"""Fixtures partagées: une Root CA et une clé feuille par session"""

from datetime import datetime, timezone

import pytest

from espki import utils
from espki.keygen import keygen
from espki.models import DistinguishedName
from espki.root_ca import CAIssuer

FIXED_NOW = datetime(2026, 1, 1, 12, 0, 0, tzinfo=timezone.utc)

ROOT_SUBJECT = DistinguishedName(
    common_name="KubeDB Com. Root CA",
    organization=("Elasticsearch Operator",),
)


@pytest.fixture(scope="session", autouse=True)
def quiet_console():
    utils.set_quiet(True)
    yield
    utils.set_quiet(False)


@pytest.fixture(scope="session")
def ca():
    return CAIssuer().issue_ca(ROOT_SUBJECT)


@pytest.fixture(scope="session")
def fixed_ca():
    return CAIssuer().issue_ca(DistinguishedName(common_name="Test Root"), now=FIXED_NOW)


@pytest.fixture(scope="session")
def leaf_key():
    return keygen.generate_rsa_key()
