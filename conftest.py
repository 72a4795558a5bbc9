# This file lists files which should be ignored by pytest
collect_ignore = ["setup.py"]

pytest_plugins = ['bot74.tests.pytest_plugin']
