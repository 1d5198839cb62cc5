import typing
import types
from dataclasses import dataclass, MISSING
import numpy as np
from ..exceptions import ConfigurationConsistencyError
from ..logging import log

if typing.TYPE_CHECKING:
    from .general import CaseSetup


class AutoDataclass(type):

    def __new__(mcs, name, bases, attrs):

        cls = super().__new__(mcs, name, bases, attrs)

        return dataclass(cls)  # type: ignore


class SetupBase(metaclass=AutoDataclass):
    """Base of configuration sections

    Subclasses are dataclasses, initialized from the raw dictionaries
    returned by the YAML parser through ``from_raw``. Attribute types are
    taken from the annotations of the subclass.
    """

    @staticmethod
    def __type_is_enumeration(_type) -> bool:

        # Ensure __members__ is present
        if not hasattr(_type, "__members__"):
            return False

        # Get first item in __members__
        member = list(getattr(_type, "__members__").values())[0]

        # If not of the same type as _type, not an enumeration
        if not isinstance(member, _type):
            return False

        return True

    @classmethod
    def __process_single_attribute(cls, name: str, target_type, value):

        # Initialize from raw if possible
        if hasattr(target_type, "from_raw"):
            log.debug(f"Initializing from raw: {name} - {target_type}")
            return getattr(target_type, "from_raw")(value)

        # Avoid casting None when a parameter is not set
        if value is None:
            return value

        # Handle enumerations
        if cls.__type_is_enumeration(target_type):
            log.debug(f"Initializing enumeration: {name} - {target_type}")

            # Fail if value is not an option
            if value not in getattr(target_type, "__members__"):
                log.error(f"Invalid option {value} for enumeration {target_type}")
                raise ConfigurationConsistencyError(
                    f"Invalid option {value} for {name} of {cls.__name__}"
                )

            return getattr(target_type, value)

        # Handle numpy arrays
        if (target_type is np.ndarray) and isinstance(value, list):
            log.debug(f"Initializing numpy array: {name} - {target_type}")
            return np.array(value, dtype=float)

        # Otherwise, initialize with constructor
        log.debug(f"Initializing from constructor: {name} - {target_type}")
        try:
            return target_type(value)
        except (TypeError, ValueError) as error:
            log.error(f"Invalid value {value} for {name} of {cls.__name__}")
            raise ConfigurationConsistencyError(
                f"Invalid value {value} for {name} of {cls.__name__}"
            ) from error

    @classmethod
    def __process_attribute(cls, name: str, value: typing.Any):

        # Get type of attribute from annotation
        argtype = cls.__annotations__[name]

        # Check if the attribute is a value, or a collection of values
        if not isinstance(argtype, types.GenericAlias):

            return cls.__process_single_attribute(name, argtype, value)

        # Process dictionary of values
        if isinstance(value, dict):

            # Get desired type for values
            __value_type = argtype.__args__[-1]

            # Generate dictionary with processed single values
            return {
                key: cls.__process_single_attribute(key, __value_type, _val)
                for key, _val in value.items()
            }

        # Process list of values
        if isinstance(value, list):

            # Get desired type for values
            __value_type = argtype.__args__[0]

            # Generate list with processed single values
            return [
                cls.__process_single_attribute(
                    f"Item {idx} of {name}", __value_type, item
                )
                for idx, item in enumerate(value)
            ]

        # Take care of errors in __process_single_attribute
        return cls.__process_single_attribute(name, argtype, value)

    @classmethod
    def __has_default(cls, name: str) -> bool:

        _field = getattr(cls, "__dataclass_fields__")[name]

        return _field.default is not MISSING or _field.default_factory is not MISSING

    @classmethod
    def from_raw(cls, raw_configuration: dict[str, typing.Any] | None) -> "typing.Self":

        # Initialize dictionary with arguments of the class
        kwargs: dict[str, typing.Any] = {}

        # If raw configuration is dictionary, initialize based on it
        if isinstance(raw_configuration, dict):

            for raw_key, raw_value in raw_configuration.items():

                # Make key lowercase
                argname: str = raw_key.lower()

                # Ignore item if data structure is not available
                if argname not in cls.__annotations__:
                    log.warning(
                        f"Ignoring attribute {argname} of {cls.__name__}"
                        f" :: Data structure is not available"
                    )
                    continue

                # Process item
                kwargs[argname] = cls.__process_attribute(argname, raw_value)

        # Handle case in which section is missing from configuration file
        elif raw_configuration is None:

            # Try to mark as not present (all fields will be None)
            if "present" in getattr(cls, "__dataclass_fields__"):
                kwargs["present"] = False
            else:
                log.error(
                    f"Missing section {cls.__name__} in configuration could not "
                    "be marked as not present"
                )
                raise ConfigurationConsistencyError(
                    f"Missing section {cls.__name__} in configuration"
                )

        else:

            log.error(f"Invalid type for raw_configuration: {type(raw_configuration)}")
            raise ConfigurationConsistencyError(
                f"Invalid type for {cls.__name__}: {type(raw_configuration)}"
            )

        # Fill missing arguments setting them to None
        for expected_kwarg in cls.__annotations__:

            # Identify missing arguments for class constructor
            if expected_kwarg not in kwargs:

                # Get expected type of argument
                expected_type = cls.__annotations__[expected_kwarg]

                # If the expected type has from_raw, process
                if hasattr(expected_type, "from_raw"):
                    kwargs[expected_kwarg] = getattr(expected_type, "from_raw")(None)
                    continue

                # If argument has a default value, use default
                if cls.__has_default(expected_kwarg):
                    continue

                # Set argument to None and raise warning
                log.warning(f"Setting {expected_kwarg} to None : {cls.__name__}")
                kwargs[expected_kwarg] = None

        return cls(**kwargs)

    def require(self, name: str) -> typing.Any:
        """Value of an attribute that must be set in the configuration"""

        value = getattr(self, name)

        if value is None:
            log.error(
                f"Parameter {name} not set in configuration file"
                f" :: {self.__class__.__name__}"
            )
            raise ConfigurationConsistencyError(
                f"Parameter {name} of {self.__class__.__name__} not set"
            )

        return value


class SettingsGenerator[T]:

    def __init__(self, name: str, local_config: T, config: "CaseSetup") -> None:

        self.name = name
        self.local = local_config
        self.config = config

        return None
