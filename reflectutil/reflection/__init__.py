"""Reflection helpers: field lookup and access, constructors, classification."""

from .classify import ARRAY_TYPES as ARRAY_TYPES
from .classify import is_abstract as is_abstract
from .classify import is_array as is_array
from .classify import is_enum as is_enum
from .classify import is_final as is_final
from .classify import is_interface as is_interface
from .classify import is_list as is_list
from .classify import is_map as is_map
from .classify import is_record as is_record
from .classify import is_set as is_set
from .classify import is_static as is_static
from .constructors import Comparator as Comparator
from .constructors import constructor_with_extreme_arity as constructor_with_extreme_arity
from .constructors import constructor_with_most_parameters as constructor_with_most_parameters
from .constructors import constructors as constructors
from .constructors import default_constructor as default_constructor
from .constructors import new_instance as new_instance
from .errors import *
from .fields import all_fields as all_fields
from .fields import get_value as get_value
from .fields import resolve_field as resolve_field
from .fields import set_value as set_value
from .fields import set_value_forced as set_value_forced
from .types import ConstructorDescriptor as ConstructorDescriptor
from .types import FieldDescriptor as FieldDescriptor
from .types import Modifier as Modifier
from .types import ParameterDescriptor as ParameterDescriptor
from .types import TypeDescriptor as TypeDescriptor
from .types import describe as describe
