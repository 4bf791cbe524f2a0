# -*- coding: utf-8 -*-

import pathlib

DEFAULT_LOGLEVEL = "INFO"
TEST_LOGLEVEL = "TRACE"
DEFAULT_TIMEOUT = None  # seconds, None leaves requests' blocking default
SINGLE_LINE_ERR_LOG = False  # reformat tracebacks into a single line
CONFIG_DIR = pathlib.Path.home() / ".calnex"

PROBLEM_REPORT_PREFIX = "calnex_problem_report_"
PROBLEM_REPORT_SUFFIX = ".tar"
CHUNK_SIZE = 64 * 1024  # bytes per streamed read/write
