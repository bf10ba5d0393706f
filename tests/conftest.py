#!/usr/bin/env python3
# CUI // SP-PROPIN
"""Shared test fixtures for the RFP Analyzer test suite."""

import sys
from pathlib import Path

import pytest

# Add project root to path
BASE_DIR = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(BASE_DIR))


SAMPLE_RFP = """\
ACME Corp Security Questionnaire
Please answer every question below.

1. Do you encrypt data at rest?
2) Describe your incident response and audit logging procedures.
   Include escalation paths
   and notification timelines.

3. Is MFA enforced for all administrative accounts?
4. Explain how the SOC monitors cloud workloads.
5. Which framework governs your compliance program?
6. Provide the name of your account manager.
"""


@pytest.fixture
def sample_rfp_text():
    """A small questionnaire with preamble, wrapped lines and blank lines."""
    return SAMPLE_RFP


@pytest.fixture
def session():
    """A fresh, empty review session."""
    from rfp_analyzer.session.rfp_session import RfpSession
    return RfpSession()


@pytest.fixture
def loaded_session(session, sample_rfp_text):
    """Session with SAMPLE_RFP loaded as acme_rfp.txt."""
    session.load_document(sample_rfp_text, "acme_rfp.txt")
    return session


@pytest.fixture
def tmp_config(tmp_path):
    """Write a partial YAML config and return its path."""
    path = tmp_path / "rfp_analyzer_config.yaml"
    path.write_text(
        "upload:\n"
        "  max_bytes: 2048\n"
        "dashboard:\n"
        "  port: 5099\n",
        encoding="utf-8",
    )
    return path
