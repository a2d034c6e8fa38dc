import cupy as cp
import pytest

from cuequalize.timing import StageTimer, TimingReport


def test_report():
    report = TimingReport()
    report.add('histogram', 1500)
    report.add('scan', 250)
    assert list(report) == ['histogram', 'scan']
    assert report['scan'] == 250
    assert 'histogram' in report
    assert len(report) == 2
    assert report.total == 1750
    assert dict(report.stages) == {'histogram': 1500, 'scan': 250}
    text = report.format()
    assert 'histogram kernel execution time [ns]: 1500' in text
    assert text.endswith('Total execution time [ns]: 1750')


def test_report_is_read_only():
    report = TimingReport()
    report.add('scan', 1)
    with pytest.raises(TypeError):
        report.stages['scan'] = 2
    with pytest.raises(ValueError):
        report.add('scan', 2)


def test_empty_report():
    report = TimingReport()
    assert report.total == 0
    assert report.format() == 'Total execution time [ns]: 0'


def test_stage_timer():
    report = TimingReport()
    x = cp.arange(1 << 20, dtype=cp.float32)
    with StageTimer('square', report) as timer:
        y = x * x
    assert timer.elapsed_ns >= 0
    assert report['square'] == timer.elapsed_ns
    assert float(y[3]) == 9.0


def test_stage_timer_on_stream():
    stream = cp.cuda.Stream()
    with stream:
        with StageTimer('fill', stream=stream) as timer:
            cp.ones(1024)
    assert timer.elapsed_ns >= 0


def test_stage_timer_skips_failed_stage():
    report = TimingReport()
    with pytest.raises(RuntimeError):
        with StageTimer('broken', report) as timer:
            raise RuntimeError('launch failed')
    assert 'broken' not in report
    assert timer.elapsed_ns is None
