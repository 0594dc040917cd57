#!/usr/bin/env python3
"""Chrome DevTools demo.

Requires chromedriver running on port 4444:

    chromedriver --port=4444

Then:

    WEBDRIVER_URL=http://localhost:4444 python scripts/chrome_devtools_demo.py
"""

import logging
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT))

from webdriver_client import DesiredCapabilities, WebDriver, WebDriverError  # noqa: E402
from webdriver_client.extensions.chrome import ChromeDevTools, NetworkConditions  # noqa: E402

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("webdriver.demo")


def main() -> int:
    try:
        with WebDriver.from_env(DesiredCapabilities.chrome()) as driver:
            dev_tools = ChromeDevTools(driver.session)
            conditions = NetworkConditions(download_throughput=20, upload_throughput=10)
            dev_tools.set_network_conditions(conditions)
            conditions = dev_tools.get_network_conditions()
            print(f"Conditions: {conditions}")

            version_info = dev_tools.execute_cdp("Browser.getVersion")
            print(f"Chrome Version: {version_info}")
    except WebDriverError as exc:
        logger.error("demo_failed %s", exc.to_dict())
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
