# This file is part of netifcfg. See LICENSE file for license information.
