"""
Loads layered configuration files with configobj and applies the values to modules.
"""

import logging
import os
import platform

from configobj import ConfigObj, ConfigObjError, Section, flatten_errors
from configobj.validate import Validator

logger = logging.getLogger(__name__)

config_extension = '.cfg'


def config_flavor(name, flavor=None):
    return name if not flavor else name + '.' + flavor


def config_filename(name, directory=None):
    """
    Determines the location of a config file in the given directory.
    """
    return os.path.join(directory, name + config_extension)


def user_config_filename(name):
    return os.path.expanduser('~/' + name + config_extension)


def load_config_file_base(file, must_exist=True):
    """
    Parses one configuration file. Values may refer to other values in the same section as $name.
    A missing file raises IOError when must_exist is set, and otherwise gives an empty configuration.
    """
    if not must_exist and not os.path.exists(file):
        return ConfigObj()
    try:
        return ConfigObj(file, interpolation='Template', file_error=True)
    except ConfigObjError as e:
        raise ConfigObjError("%s: %s" % (file, e)) from e


def config_flavor_file(name, directory, subpart=None) -> ConfigObj:
    """
    Loads name.subpart.cfg from the directory, or name.cfg when there is no subpart.
    """
    configname = config_flavor(name, subpart)
    file = config_filename(configname, directory)
    return load_config_file_base(file, False)


def map_os_name(name):
    """
    >>> map_os_name('Windows')
    'windows'
    >>> map_os_name("Darwin")
    'osx'
    """
    name = name.lower()
    if name == 'darwin':
        name = 'osx'
    return name


def os_name():
    return map_os_name(platform.system())


def describe_errors(config, result):
    """
    Lists the failed keys from a validation result, such as 'btterminal/settings/scan_duration'.
    """
    return ", ".join('/'.join(sections + [key or '(section missing)'])
                     for sections, key, _ in flatten_errors(config, result))


def load_schema(name, directory):
    """
    Loads the "schema" specialization as a configspec. Check expressions such as
    option('a', 'b') contain commas, so values are not parsed as lists.
    """
    file = config_filename(config_flavor(name, 'schema'), directory)
    return ConfigObj(file, interpolation=False, list_values=False, _inspec=True) \
        if os.path.exists(file) else ConfigObj()


def load_config(name, directory, user_config=True, checks=None):
    """
        Loads all the configuration files that relate to the given name.
        Configurations are merged in this order, later files overriding earlier ones:
        - the default specialization
        - the platform specialization
        - the user override in the home directory
        - the base configuration
        The merged configuration is then validated against the "schema" specialization,
        which also converts values to their declared types and supplies defaults.
    :directory: the location of the configuration files
    :checks: additional check functions for the schema, by name
    :return: the validated ConfigObj
    """
    config = ConfigObj()
    config.merge(config_flavor_file(name, directory, 'default'))
    config.merge(config_flavor_file(name, directory, os_name()))
    if user_config:
        config.merge(load_config_file_base(user_config_filename(name), must_exist=False))
    config.merge(config_flavor_file(name, directory))

    config.configspec = load_schema(name, directory)
    result = config.validate(Validator(checks or {}), preserve_errors=True)
    if result is not True:
        raise ConfigObjError("the config file %s failed validation: %s" % (name, describe_errors(config, result)))
    return config


def fetch_conf_path(conf: Section, path):
    """
    Retrieves the named configuration section
    :param conf:        The root configuration
    :param path:        An iterable that lists the names of the config to resolve
    :return: The configuration section identified by the path, or None
    """
    for p in path:
        conf = conf.get(p, None)
        if conf is None:
            return None
    return conf


def apply_conf(conf: Section, target):
    """
    Sets each attribute of the target that has a value in the configuration section.
    Values without a corresponding attribute are ignored.
    """
    for k, v in conf.items():
        if hasattr(target, k):
            setattr(target, k, v)


def apply_conf_path(conf: Section, name_parts, target):
    conf = fetch_conf_path(conf, name_parts)
    if conf:
        apply_conf(conf, target)


def configure_module(module, config_name=None, user_config=True, checks=None):
    """
    Applies the configuration to the given module.
    The configuration files are located in the module's directory and named after config_name, which
    defaults to the last part of the module name. Values are read from the section path that matches the
    module's fully qualified name, e.g. [btterminal] [[settings]] for btterminal.settings.
    """
    fqname = module.__name__
    if not config_name:
        config_name = fqname.split('.')[-1]
    conf = load_config(config_name, os.path.dirname(module.__file__), user_config, checks)
    logger.debug("applying configuration %s to %s" % (config_name, fqname))
    apply_conf_path(conf, fqname.split('.'), module)
    return conf
