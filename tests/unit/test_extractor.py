# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for SignalExtractor."""

import pytest
from pydantic import ValidationError

from src.core.struggle.config import DetectionConfig, StruggleConfig
from src.core.struggle.detectors import BaseDetector, FailedAttemptDetector
from src.core.struggle.extractor import SignalExtractor
from src.core.struggle.types import InteractionRecord, SignalType


class _ExplodingDetector(BaseDetector):
    """Detector whose inputs cannot be computed."""

    @property
    def signal_type(self) -> SignalType:
        return SignalType.LONG_RESPONSE_TIME

    def detect(self, context):
        raise ZeroDivisionError("baseline is zero")


class _OvershootingDetector(BaseDetector):
    """Detector returning a magnitude above 1."""

    @property
    def signal_type(self) -> SignalType:
        return SignalType.HINT_DEPENDENCY

    def detect(self, context):
        return self.draft(1.7)


@pytest.fixture
def extractor(struggle_config):
    """Extractor with the default detectors."""
    return SignalExtractor(struggle_config)


class TestBuildWindow:
    """Tests for SignalExtractor.build_window."""

    def test_current_interaction_included_once(self, extractor, make_record):
        """Verify the current interaction is first and not duplicated."""
        current = make_record()
        others = [make_record(), make_record()]

        window = extractor.build_window(current, [others[0], current, others[1]])

        assert window[0] is current
        assert [r.id for r in window].count(current.id) == 1
        assert len(window) == 3

    def test_current_interaction_added_when_missing(self, extractor, make_record):
        """Verify a window loaded before the interaction was stored still includes it."""
        current = make_record()

        assert extractor.build_window(current, [make_record()])[0] is current

    def test_window_is_capped(self, make_record):
        """Verify the window never exceeds window_limit."""
        config = StruggleConfig(detection=DetectionConfig(window_limit=5))
        extractor = SignalExtractor(config)

        window = extractor.build_window(make_record(), [make_record() for _ in range(20)])

        assert len(window) == 5


class TestExtract:
    """Tests for SignalExtractor.extract."""

    def test_failed_interaction_yields_failed_attempt(self, extractor, make_record, now):
        """Verify a failed interaction on a fresh topic yields one signal."""
        interaction = make_record(status="failed", topic="recursion", input_text="why")

        drafts = extractor.extract(interaction, [], now=now)

        assert [(d.signal_type, d.value) for d in drafts] == [(SignalType.FAILED_ATTEMPT, 1.0)]

    def test_multiple_rules_can_fire(self, extractor, make_record, now):
        """Verify rules are independent."""
        interaction = make_record(status="failed", input_text="I'm stuck and confused, hint?")
        recent = [make_record(), make_record()]

        kinds = {d.signal_type for d in extractor.extract(interaction, recent, now=now)}

        assert kinds == {
            SignalType.FAILED_ATTEMPT,
            SignalType.REPEATED_TOPIC,
            SignalType.NEGATIVE_SENTIMENT,
            SignalType.HINT_DEPENDENCY,
        }

    @pytest.mark.parametrize("role", ["tutor", "admin"])
    def test_non_learner_interactions_are_ignored(self, extractor, make_record, now, role):
        """Verify only learner interactions produce signals."""
        interaction = make_record(role=role, status="failed")

        assert extractor.extract(interaction, [], now=now) == []

    def test_failing_detector_is_skipped(self, struggle_config, make_record, now):
        """Verify one broken rule does not abort the pass."""
        detection = struggle_config.detection
        extractor = SignalExtractor(
            struggle_config,
            detectors=[_ExplodingDetector(detection), FailedAttemptDetector(detection)],
        )

        drafts = extractor.extract(make_record(status="failed"), [], now=now)

        assert [d.signal_type for d in drafts] == [SignalType.FAILED_ATTEMPT]

    def test_values_are_clamped(self, struggle_config, make_record, now):
        """Verify magnitudes are clamped to [0, 1]."""
        extractor = SignalExtractor(
            struggle_config,
            detectors=[_OvershootingDetector(struggle_config.detection)],
        )

        drafts = extractor.extract(make_record(), [], now=now)

        assert drafts[0].value == 1.0


class TestInteractionRecord:
    """Tests for InteractionRecord input validation."""

    def test_unknown_role_is_rejected(self, make_record):
        """Verify an unknown role fails at construction."""
        with pytest.raises(ValidationError):
            make_record(role="alumni_bot")

    def test_unknown_status_is_rejected(self, make_record):
        """Verify an unknown status fails at construction."""
        with pytest.raises(ValidationError):
            make_record(status="exploded")

    def test_labels_are_normalised(self):
        """Verify case-insensitive enums and blank label defaults."""
        record = InteractionRecord(
            id="i-1",
            user_id="u-1",
            role="LEARNER",
            status="Failed",
            track="  ",
            topic=None,
        )

        assert record.is_learner
        assert record.track == "general"
        assert record.topic == "unknown"
        assert record.created_at is None
