"""Tests for PingProbe."""

import asyncio

import pytest
from unittest.mock import AsyncMock, Mock, call, patch

from netpulse.probes.ping_probe import PingProbe, ProbeStartupError
from netpulse.services.resolver import ResolutionError


LINUX_REPLY = b"""PING 10.0.0.1 (10.0.0.1) 56(84) bytes of data.
64 bytes from 10.0.0.1: icmp_seq=1 ttl=64 time=12.3 ms

--- 10.0.0.1 ping statistics ---
1 packets transmitted, 1 received, 0% packet loss, time 0ms
"""

LATE_REPLY = b"64 bytes from 10.0.0.1: icmp_seq=1 ttl=64 time=600 ms"


@pytest.fixture
def resolver():
    """Resolver returning the address unchanged."""
    return Mock(resolve=AsyncMock(side_effect=lambda address: address))


@pytest.fixture
def probe(resolver, logger):
    """Linux-flavoured ping probe with an explicit binary."""
    ping = PingProbe(resolver, logger, ping_binary="/bin/ping")
    ping.system = "linux"
    return ping


def fake_process(stdout=b"", returncode=0):
    proc = Mock()
    proc.communicate = AsyncMock(return_value=(stdout, b""))
    proc.wait = AsyncMock(return_value=returncode)
    proc.returncode = returncode
    return proc


class TestPingProbeStartup:
    """Test suite for ICMP client initialization."""

    def test_missing_ping_binary_is_fatal(self, resolver, logger):
        """Test startup fails when no ping executable exists."""
        with patch("netpulse.probes.ping_probe.shutil.which", return_value=None):
            with pytest.raises(ProbeStartupError):
                PingProbe(resolver, logger)

    def test_linux_command(self, probe):
        """Test Linux arguments round the timeout up to whole seconds."""
        assert probe._build_command("10.0.0.1", 1500) == ["/bin/ping", "-c", "1", "-W", "2", "10.0.0.1"]
        assert probe._build_command("10.0.0.1", 200) == ["/bin/ping", "-c", "1", "-W", "1", "10.0.0.1"]

    def test_windows_command(self, probe):
        """Test Windows arguments use milliseconds."""
        probe.system = "windows"
        assert probe._build_command("10.0.0.1", 1500) == ["/bin/ping", "-n", "1", "-w", "1500", "10.0.0.1"]


class TestPingProbe:
    """Test suite for PingProbe.probe."""

    @pytest.mark.asyncio
    async def test_first_reply_wins(self, probe):
        """Test success on the first reply with 0% loss."""
        with patch.object(probe, "_echo", new=AsyncMock(return_value=8.5)) as echo:
            outcome = await probe.probe("10.0.0.1", count=4, timeout_ms=500)

        assert outcome.success is True
        assert outcome.latency_ms == 8.5
        assert outcome.packet_loss == 0.0
        assert outcome.message == "ICMP Response OK"
        assert echo.await_count == 1

    @pytest.mark.asyncio
    async def test_reply_after_losses(self, probe):
        """Test later replies still succeed within the same probe call."""
        with patch.object(probe, "_echo", new=AsyncMock(side_effect=[None, None, 20.0])) as echo:
            outcome = await probe.probe("10.0.0.1", count=4, timeout_ms=500)

        assert outcome.success is True
        assert outcome.latency_ms == 20.0
        assert echo.await_count == 3

    @pytest.mark.asyncio
    async def test_all_requests_lost(self, probe):
        """Test total loss after count attempts."""
        with patch.object(probe, "_echo", new=AsyncMock(return_value=None)) as echo:
            outcome = await probe.probe("10.0.0.1", count=3, timeout_ms=500)

        assert outcome.success is False
        assert outcome.latency_ms is None
        assert outcome.packet_loss == 100.0
        assert outcome.message == "Request Timeout (Packet Loss 100%)"
        assert echo.await_count == 3

    @pytest.mark.asyncio
    async def test_waits_between_lost_requests(self, probe):
        """Test a 50 ms wait follows every lost request except the last."""
        with patch.object(probe, "_echo", new=AsyncMock(return_value=None)), \
                patch("netpulse.probes.ping_probe.asyncio.sleep", new=AsyncMock()) as sleep:
            await probe.probe("10.0.0.1", count=3, timeout_ms=500)

        assert sleep.await_count == 2
        assert sleep.await_args_list == [call(0.05)] * 2

    @pytest.mark.asyncio
    async def test_single_request_never_waits(self, probe):
        """Test a single lost request returns without waiting."""
        with patch.object(probe, "_echo", new=AsyncMock(return_value=None)), \
                patch("netpulse.probes.ping_probe.asyncio.sleep", new=AsyncMock()) as sleep:
            await probe.probe("10.0.0.1", count=1, timeout_ms=500)

        sleep.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_resolution_error(self, probe, resolver):
        """Test DNS failure is classified as a resolution error."""
        resolver.resolve.side_effect = ResolutionError("No IP Address Found")

        with patch.object(probe, "_echo", new=AsyncMock()) as echo:
            outcome = await probe.probe("missing.example", count=1, timeout_ms=500)

        assert outcome.success is False
        assert outcome.message == "Domain Resolution Error: No IP Address Found"
        echo.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_resolved_ip_is_pinged(self, probe, resolver):
        """Test hostnames are pinged via their resolved IP."""
        resolver.resolve.side_effect = None
        resolver.resolve.return_value = "93.184.216.34"

        with patch.object(probe, "_echo", new=AsyncMock(return_value=1.0)) as echo:
            await probe.probe("example.com", count=1, timeout_ms=500)

        echo.assert_awaited_once_with("93.184.216.34", 500)


class TestEcho:
    """Test suite for a single echo subprocess."""

    @pytest.mark.asyncio
    async def test_parses_rtt(self, probe):
        """Test RTT is taken from the ping output."""
        proc = fake_process(LINUX_REPLY)

        with patch("netpulse.probes.ping_probe.asyncio.create_subprocess_exec",
                   new=AsyncMock(return_value=proc)) as spawn:
            rtt = await probe._echo("10.0.0.1", 1000)

        assert rtt == 12.3
        assert spawn.await_args.args == ("/bin/ping", "-c", "1", "-W", "1", "10.0.0.1")

    @pytest.mark.asyncio
    async def test_nonzero_exit_is_loss(self, probe):
        """Test a failing ping process means no reply."""
        proc = fake_process(b"1 packets transmitted, 0 received, 100% packet loss", returncode=1)

        with patch("netpulse.probes.ping_probe.asyncio.create_subprocess_exec",
                   new=AsyncMock(return_value=proc)):
            assert await probe._echo("10.0.0.1", 1000) is None

    @pytest.mark.asyncio
    async def test_hung_process_is_killed(self, probe):
        """Test the outer timeout kills a ping that never returns."""
        proc = fake_process()

        async def hang():
            await asyncio.sleep(10)

        proc.communicate = hang
        probe.PROCESS_GRACE_SECONDS = 0

        with patch("netpulse.probes.ping_probe.asyncio.create_subprocess_exec",
                   new=AsyncMock(return_value=proc)):
            assert await probe._echo("10.0.0.1", 50) is None

        proc.kill.assert_called_once()

    @pytest.mark.asyncio
    async def test_windows_unreachable_is_loss(self, probe):
        """Test Windows exit code 0 without a TTL line is not a reply."""
        probe.system = "windows"
        proc = fake_process(b"Reply from 10.0.0.254: Destination host unreachable.")

        with patch("netpulse.probes.ping_probe.asyncio.create_subprocess_exec",
                   new=AsyncMock(return_value=proc)):
            assert await probe._echo("10.0.0.1", 1000) is None

    @pytest.mark.asyncio
    async def test_late_reply_is_loss(self, probe):
        """Test a reply slower than the per-request timeout is not counted."""
        proc = fake_process(LATE_REPLY)

        with patch("netpulse.probes.ping_probe.asyncio.create_subprocess_exec",
                   new=AsyncMock(return_value=proc)):
            assert await probe._echo("10.0.0.1", 300) is None

    @pytest.mark.asyncio
    async def test_late_reply_marks_host_down(self, probe):
        """Test a host answering only after the timeout is reported as total loss."""
        proc = fake_process(LATE_REPLY)

        with patch("netpulse.probes.ping_probe.asyncio.create_subprocess_exec",
                   new=AsyncMock(return_value=proc)):
            outcome = await probe.probe("10.0.0.1", count=1, timeout_ms=300)

        assert outcome.success is False
        assert outcome.packet_loss == 100.0
        assert outcome.message == "Request Timeout (Packet Loss 100%)"

    @pytest.mark.asyncio
    async def test_elapsed_time_over_timeout_is_loss(self, probe):
        """Test output without an RTT falls back to wall time against the timeout."""
        proc = fake_process(b"1 packets transmitted, 1 received")

        with patch("netpulse.probes.ping_probe.asyncio.create_subprocess_exec",
                   new=AsyncMock(return_value=proc)), \
                patch("netpulse.probes.ping_probe.time.perf_counter", side_effect=[0.0, 0.6]):
            assert await probe._echo("10.0.0.1", 300) is None
