#
# Copyright (c) 2012-2025 Snowflake Computing Inc. All rights reserved.
#

# Update this for the versions
VERSION = (0, 3, 0)
