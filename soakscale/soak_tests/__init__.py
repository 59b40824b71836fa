from .job_management_soak_test import JobManagementSoakTest as JobManagementSoakTest
from .relay_soak_test import (
    RelayReport as RelayReport,
    RelaySoakTest as RelaySoakTest,
)
from .soak_test import SoakTest as SoakTest


SOAK_TESTS: dict[str, type[SoakTest]] = {
    RelaySoakTest.name: RelaySoakTest,
    JobManagementSoakTest.name: JobManagementSoakTest,
}
