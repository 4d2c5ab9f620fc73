# -*- coding: utf-8 -*-
"""
Configuration of default options for tokenization and pattern matching.
"""

import logging
logger = logging.getLogger(__name__)

import profig


def get_configuration(filename=None):
    """
    Returns a configuration initialized with the default options.

    If a filename is given, writes a default configuration file if it doesn't
    exist, otherwise reads in values from there. If you want to change these
    parameters, use the ini file.
    """
    config = profig.Config(filename) if filename else profig.Config()
    config.init("tokens.lower_case", False, comment="convert all tokens to lower case")
    config.init("tokens.remove_punct", False, comment="drop tokens that consist of punctuation " +
                                                      "or symbols only")
    config.init("tokens.remove_numbers", False, comment="drop tokens that are numbers")
    config.init("tokens.padding", False, comment="leave a padding marker where tokens are removed, " +
                                                 "so that no false adjacencies are created")
    config.init("tokens.max_tokens", 0, comment="stop reading each text after that many tokens. " +
                                                "0 for no limit")
    config.init("patterns.valuetype", "glob", comment="how to interpret pattern strings. Valid values: " +
                                                      "'glob', 'regex', 'fixed'")
    config.init("patterns.case_insensitive", True, comment="ignore case when matching patterns")
    config.init("compound.concatenator", "_", comment="joins the parts of compounds and n-grams")

    if filename:
        logger.info("Synchronizing configuration with %s", filename)
        config.sync()
    return config


def update_configuration(config, options):
    """
    Overrides configuration values from a list of ``key:value`` strings.
    Values are converted to the type of the option's default.

    Raises:
        ValueError: for malformed options
        KeyError: for unknown keys
    """
    for option in options or ():
        key, sep, value = option.partition(':')
        if not sep:
            raise ValueError("Option {!r} is not of the form <key>:<value>".format(option))
        if key not in config:
            raise KeyError("Unknown configuration option {!r}, available: {}".format(
                key, ', '.join(config)))
        default = config[key]
        if isinstance(default, bool):
            converted = value.strip().lower() in ('1', 'true', 'yes', 'on')
        else:
            converted = type(default)(value)
        config[key] = converted
        logger.debug("Configuration option %s set to %r", key, converted)
    return config
