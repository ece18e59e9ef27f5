import re
import subprocess
from typing import Any, Dict, Optional

from macutils.core.config import MacUtilsConfig, get_config
from macutils.core.logger import get_logger

logger = get_logger(__name__)

UNKNOWN = "Unknown"


class SystemDetector:
    """
    Collects the host facts macutils needs: model identifier, serial
    number and OS version. Used by the compatibility engine and the CLI.
    """

    def __init__(self, run_cmd=None, config: Optional[MacUtilsConfig] = None):
        self.run_cmd = run_cmd or self._run
        self.config = config or get_config()

    # -----------------------------
    #  Core detection entry point
    # -----------------------------
    def detect_all(self) -> Dict[str, Any]:
        return {
            "model": self.detect_model_identifier(),
            "serial": self._detect_serial(),
            "os": self._detect_os(),
        }

    # -----------------------------
    #  Individual detectors
    # -----------------------------
    def detect_model_identifier(self) -> str:
        """Hardware model such as MacBookPro15,1; the configured override wins."""
        if self.config.model_identifier:
            return self.config.model_identifier
        try:
            model = self.run_cmd("sysctl -n hw.model").strip()
            return model or UNKNOWN
        except Exception as e:
            logger.warning(f"Could not read hw.model: {e}")
            return UNKNOWN

    def _detect_serial(self) -> str:
        try:
            output = self.run_cmd("ioreg -c IOPlatformExpertDevice -d 2")
            serial = re.search(r'"IOPlatformSerialNumber"\s*=\s*"([^"]+)"', output)
            return serial.group(1) if serial else UNKNOWN
        except Exception:
            return UNKNOWN

    def _detect_os(self) -> Dict[str, str]:
        try:
            name = self.run_cmd("sw_vers -productName").strip()
            version = self.run_cmd("sw_vers -productVersion").strip()
            return {"name": name or UNKNOWN, "version": version or UNKNOWN}
        except Exception:
            return {"name": UNKNOWN, "version": UNKNOWN}

    def _run(self, cmd: str) -> str:
        status, output = subprocess.getstatusoutput(cmd)
        return output if status == 0 else ""
