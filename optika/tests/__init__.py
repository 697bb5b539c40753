# Copyright (c) 2025 NASK. All rights reserved.
