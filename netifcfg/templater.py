# This file is part of netifcfg. See LICENSE file for license information.

import collections
import logging
import os
import re

from jinja2 import DebugUndefined as JUndefined
from jinja2 import Template as JTemplate

from netifcfg import type_utils as tu
from netifcfg import util

LOG = logging.getLogger(__name__)
TYPE_MATCHER = re.compile(r"##\s*template:(.*)", re.I)
BASIC_MATCHER = re.compile(r"\$\{([A-Za-z0-9_.]+)\}|\$([A-Za-z0-9_.]+)")
MISSING_JINJA_PREFIX = "NETIFCFG_MISSING_JINJA_VAR/"


class UndefinedJinjaVariable(JUndefined):
    """Class used to represent any undefined jinja template variable."""

    def __str__(self):
        return "%s%s" % (MISSING_JINJA_PREFIX, self._undefined_name)


def basic_render(content, params):
    """This does simple replacement of bash variable like templates.

    It identifies patterns like ${a} or $a and can also identify patterns like
    ${a.b} or $a.b which will look for a key 'b' in the dictionary rooted
    by key 'a'.
    """

    def replacer(match):
        # Only 1 of the 2 groups will actually have a valid entry.
        name = match.group(1)
        if name is None:
            name = match.group(2)
        path = collections.deque(name.split("."))
        selected_params = params
        while len(path) > 1:
            key = path.popleft()
            if not isinstance(selected_params, dict):
                raise TypeError(
                    "Can not traverse into"
                    " non-dictionary '%s' of type %s while"
                    " looking for subkey '%s'"
                    % (selected_params, tu.obj_name(selected_params), key)
                )
            selected_params = selected_params[key]
        key = path.popleft()
        if not isinstance(selected_params, dict):
            raise TypeError(
                "Can not extract key '%s' from non-dictionary '%s' of type %s"
                % (key, selected_params, tu.obj_name(selected_params))
            )
        return str(selected_params[key])

    return BASIC_MATCHER.sub(replacer, content)


def jinja_render(content, params):
    add = "\n" if content.endswith("\n") else ""
    return (
        JTemplate(
            content,
            undefined=UndefinedJinjaVariable,
            trim_blocks=True,
            lstrip_blocks=True,
        ).render(**params)
        + add
    )


def detect_template(text):
    if text.find("\n") != -1:
        ident, rest = text.split("\n", 1)
    else:
        ident = text
        rest = ""
    type_match = TYPE_MATCHER.match(ident)
    if not type_match:
        return ("basic", basic_render, text)
    template_type = type_match.group(1).lower().strip()
    if template_type == "jinja":
        return ("jinja", jinja_render, rest)
    if template_type == "basic":
        return ("basic", basic_render, rest)
    raise ValueError(
        "Unknown template rendering type '%s' requested" % template_type
    )


def render_from_file(fn, params):
    if not params:
        params = {}
    template_type, renderer, content = detect_template(util.load_text_file(fn))
    LOG.debug("Rendering content of '%s' using renderer %s", fn, template_type)
    return renderer(content, params)


def find_template(templates_dir, name):
    path = os.path.join(templates_dir, name)
    if not os.path.isfile(path):
        raise FileNotFoundError(
            "Template %s not found in %s" % (name, templates_dir)
        )
    return path
