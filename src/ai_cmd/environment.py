#!/usr/bin/env python

"""Facts about the host machine that are embedded in the system prompt."""

import getpass
import os
import platform
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class EnvironmentFacts:
    os_triple: str
    user: str
    uid: int
    group: str
    gid: int
    home: str
    cwd: str
    is_root: bool


def _group_name(gid: int) -> str:
    try:
        import grp
        return grp.getgrgid(gid).gr_name
    except (ImportError, KeyError):
        return str(gid)


def platform_tag() -> str:
    """Short lowercase platform family name, e.g. 'linux' or 'darwin'"""
    return platform.system().lower()


def collect_environment() -> EnvironmentFacts:
    """Gather the current user's identity and location"""
    uid = os.getuid() if hasattr(os, "getuid") else -1
    gid = os.getgid() if hasattr(os, "getgid") else -1
    euid = os.geteuid() if hasattr(os, "geteuid") else uid

    try:
        user = getpass.getuser()
    except (KeyError, OSError):
        user = str(uid)

    return EnvironmentFacts(
        os_triple=f"{platform.machine()}-{platform.system().lower()}-{platform.release()}",
        user=user,
        uid=uid,
        group=_group_name(gid),
        gid=gid,
        home=str(Path.home()),
        cwd=os.getcwd(),
        is_root=euid == 0,
    )
