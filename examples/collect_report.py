import sys

from calnex import CalnexAPI
from calnex.types import CalnexError
from calnex.util import start_client_log

# usage: python collect_report.py <host> <directory>
host, directory = sys.argv[1], sys.argv[2]

start_client_log(log_to_file=False, log_to_stdout=True, log_level="DEBUG")

with CalnexAPI(host, insecure=True, timeout=120) as api:
    api.stop_measure()
    try:
        path = api.fetch_problem_report(directory)
    except CalnexError as e:
        sys.exit(f"Could not fetch problem report: {e}")
    print(path)
