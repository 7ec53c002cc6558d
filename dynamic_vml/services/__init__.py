"""
Services Package - Business logic layer

- ids.py: HTML-safe unique identifiers for containers and items
- registry.py: declarative @dynamic_list configuration and item types
- resolution.py: the ParameterResolver merging configuration sources
- wrapping.py: wrap_single / wrap_many helpers building DynamicLists
- binding.py: bind_dynamic_list, rebuilding lists from submitted forms

Import the modules directly (e.g. ``from dynamic_vml.services.registry
import dynamic_list``); the models package depends on ids.py, so this
package does not re-export anything.
"""
