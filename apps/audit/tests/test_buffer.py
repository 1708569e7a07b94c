import json
import threading

import pytest

from apps.audit.buffer import (
    AuditLog,
    NullAuditLog,
    get_audit_log,
    registered_logs,
    reset_audit_logs,
    should_escalate,
)
from apps.audit.trail import append_line, recent_lines


# =============================================================================
# Ring Buffer Tests
# =============================================================================

class TestAuditLog:
    """Tests for the bounded audit buffer."""

    def test_keeps_last_n_entries_in_order(self):
        log = AuditLog('test', capacity=5)
        for i in range(12):
            log.record('event', n=i)

        assert len(log) == 5
        assert [e.payload['n'] for e in log.all()] == [7, 8, 9, 10, 11]

    def test_recent_returns_suffix(self):
        log = AuditLog('test', capacity=10)
        for i in range(6):
            log.record('event', n=i)

        assert [e.payload['n'] for e in log.recent(3)] == [3, 4, 5]

    def test_recent_limit_larger_than_log(self):
        log = AuditLog('test', capacity=10)
        log.record('only')

        assert len(log.recent(50)) == 1

    def test_recent_non_positive_limit(self):
        log = AuditLog('test', capacity=10)
        log.record('event')

        assert log.recent(0) == []

    @pytest.mark.parametrize('capacity', [0, 1001])
    def test_capacity_out_of_range(self, capacity):
        with pytest.raises(ValueError):
            AuditLog('test', capacity=capacity)

    def test_export_json(self):
        log = AuditLog('test', capacity=10)
        log.record('points_added', actor='alice@example.com', points=20)
        log.record('reward_redeemed', escalate=True)

        data = json.loads(log.export_json())

        assert [e['event'] for e in data] == ['points_added', 'reward_redeemed']
        assert data[0]['actor'] == 'alice@example.com'
        assert data[0]['payload'] == {'points': 20}
        assert data[1]['escalate'] is True
        assert '\n  ' in log.export_json()

    def test_export_last_json_empty(self):
        assert AuditLog('test').export_last_json() is None

    def test_summary(self):
        log = AuditLog('test', capacity=3)
        log.record('a', escalate=True)
        log.record('b')

        summary = log.summary()

        assert summary['count'] == 2
        assert summary['escalated'] == 1
        assert summary['capacity'] == 3

    def test_clear(self):
        log = AuditLog('test')
        log.record('a')
        log.clear()

        assert len(log) == 0
        assert log.last() is None

    def test_concurrent_appends_respect_capacity(self):
        log = AuditLog('test', capacity=50)

        def worker():
            for _ in range(100):
                log.record('tick')

        threads = [threading.Thread(target=worker) for _ in range(4)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len(log) == 50

    def test_null_log_keeps_nothing(self):
        log = NullAuditLog()
        log.record('ignored')

        assert len(log) == 0


# =============================================================================
# Registry Tests
# =============================================================================

class TestRegistry:

    def test_same_name_same_log(self):
        assert get_audit_log('tag') is get_audit_log('tag')

    def test_capacity_from_settings(self, settings):
        settings.FURFOLIO_AUDIT_CAPACITIES = {'tag': 7}

        assert get_audit_log('tag').capacity == 7

    def test_unknown_name_gets_default_capacity(self, settings):
        settings.FURFOLIO_AUDIT_DEFAULT_CAPACITY = 33

        assert get_audit_log('something_new').capacity == 33

    def test_reset(self):
        get_audit_log('tag').record('create')
        reset_audit_logs()

        assert registered_logs() == []
        assert len(get_audit_log('tag')) == 0


# =============================================================================
# Escalation and Trail Tests
# =============================================================================

class TestEscalation:

    @pytest.mark.parametrize('operation, expected', [
        ('delete', True),
        ('deleted', True),
        ('critical_failure', True),
        ('DANGER zone', True),
        ('create', False),
        ('', False),
    ])
    def test_keywords(self, operation, expected):
        assert should_escalate(operation) is expected

    def test_force(self):
        assert should_escalate('create', force=True) is True


class TestTrail:

    def test_append_line_is_stamped(self):
        lines = append_line([], 'Created')

        assert len(lines) == 1
        assert lines[0].startswith('[')
        assert lines[0].endswith('] Created')

    def test_append_line_trims_oldest(self):
        lines = []
        for i in range(5):
            lines = append_line(lines, f'line {i}', limit=3)

        assert [line.split('] ')[1] for line in lines] == ['line 2', 'line 3', 'line 4']

    def test_recent_lines(self):
        assert recent_lines(['a', 'b', 'c', 'd'], 2) == ['c', 'd']
        assert recent_lines(None) == []
