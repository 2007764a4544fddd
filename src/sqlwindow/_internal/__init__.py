#
# Copyright (c) 2012-2025 Snowflake Computing Inc. All rights reserved.
#
