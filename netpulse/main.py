"""Main application entry point for the NetPulse reachability monitor."""

import argparse
import asyncio
import logging
import signal
import sys

from .api.status_server import StatusServer
from .config.loader import ConfigLoader
from .config.models import MonitorSystemConfig
from .config.settings import Settings
from .engine.dispatcher import NotificationDispatcher
from .engine.executor import CheckExecutor
from .engine.scheduler import CycleScheduler
from .engine.state import MonitorState
from .probes.ping_probe import ProbeStartupError
from .services.webhook_client import WebhookClient
from .utils.logger import setup_logger


class NetPulseApp:
    """
    Main monitoring application.

    Wires configuration, probes, state, notifications and the status
    server together, then runs the cycle loop.
    """

    def __init__(
        self,
        config_path: str = "config/config.yaml",
        log_level: str = "INFO",
        log_format: str = "json"
    ):
        """
        Initialize monitoring application.

        Args:
            config_path: Path to configuration file
            log_level: Logging level name
            log_format: "json" or "text"

        Raises:
            SystemExit: If configuration is invalid or the ICMP client is unavailable
        """
        self.config_path = config_path
        self.logger = setup_logger("netpulse", log_level, json_format=(log_format == "json"))

        # Setup signal handlers; in-flight probes are not drained
        signal.signal(signal.SIGTERM, self._signal_handler)
        signal.signal(signal.SIGINT, self._signal_handler)

        self.logger.info("=" * 60)
        self.logger.info("NetPulse Engine")
        self.logger.info("=" * 60)

        self.config = self._load_config()

        try:
            self.executor = CheckExecutor.create(self.config, self.logger)
        except ProbeStartupError as e:
            self.logger.error(str(e))
            sys.exit(1)

        webhook = None
        if self.config.webhook_url:
            webhook = WebhookClient(self.config.webhook_url, logger=self.logger.getChild("WebhookClient"))

        self.state = MonitorState()
        self.dispatcher = NotificationDispatcher(webhook, self.logger)
        self.scheduler = CycleScheduler(
            self.config, self.executor, self.state, self.dispatcher, self.logger
        )
        self.status_server = StatusServer(self.state, self.config.api_port, logger=self.logger)
        self.logger.info("Application initialized successfully")

    def _load_config(self) -> MonitorSystemConfig:
        """
        Load and validate configuration.

        Returns:
            MonitorSystemConfig: Loaded configuration

        Raises:
            SystemExit: If configuration is invalid
        """
        try:
            self.logger.info(f"Loading configuration from {self.config_path}")
            config = ConfigLoader.load_from_file(self.config_path)
            self.logger.info("Configuration loaded successfully")
            return config

        except FileNotFoundError:
            self.logger.error(
                f"Configuration file not found: {self.config_path}\n"
                "Please create config/config.yaml from config/config.example.yaml"
            )
            sys.exit(1)

        except Exception as e:
            self.logger.error(f"Failed to load configuration: {e}", exc_info=True)
            sys.exit(1)

    def _signal_handler(self, signum, frame):
        signal_name = signal.Signals(signum).name
        self.logger.info(f"Received {signal_name}, shutting down NetPulse Engine...")
        sys.exit(0)

    async def run_once(self):
        """Seed state, run a single cycle and wait for its notifications."""
        self.scheduler.initialize_state()
        try:
            await self.scheduler.run_cycle()
        finally:
            await self.dispatcher.aclose()

    async def run(self):
        """
        Start the status server and loop forever.

        Raises:
            OSError: If the status server port cannot be bound
        """
        await self.status_server.start()
        try:
            await self.scheduler.run_forever()
        finally:
            await self.status_server.stop()
            await self.dispatcher.aclose()


def main():
    """
    CLI entry point.

    Parses command-line arguments and starts the monitor.
    """
    parser = argparse.ArgumentParser(
        description='NetPulse network reachability monitor',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Run continuously (default)
  python -m netpulse.main

  # Run one cycle and exit
  python -m netpulse.main --run-once

  # Use custom config file
  python -m netpulse.main --config /path/to/config.yaml
        """
    )

    parser.add_argument(
        '--config',
        default=Settings.config_path(),
        help='Path to configuration file (default: config/config.yaml or NETPULSE_CONFIG env var)'
    )

    parser.add_argument(
        '--run-once',
        action='store_true',
        help='Run one monitoring cycle and exit'
    )

    parser.add_argument(
        '--log-level',
        default=Settings.log_level(),
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
        help='Logging level (default: INFO or LOG_LEVEL env var)'
    )

    parser.add_argument(
        '--log-format',
        default=Settings.log_format(),
        choices=['json', 'text'],
        help='Log output format (default: json or LOG_FORMAT env var)'
    )

    args = parser.parse_args()

    logging.getLogger().setLevel(args.log_level)

    try:
        app = NetPulseApp(
            config_path=args.config,
            log_level=args.log_level,
            log_format=args.log_format
        )

        if args.run_once:
            exit_code = 0
            try:
                asyncio.run(app.run_once())
            except Exception:
                app.logger.error("Monitoring cycle failed", exc_info=True)
                exit_code = 1
            sys.exit(exit_code)
        else:
            asyncio.run(app.run())

    except Exception as e:
        logging.error(f"Application startup failed: {e}", exc_info=True)
        sys.exit(1)


if __name__ == '__main__':
    main()
