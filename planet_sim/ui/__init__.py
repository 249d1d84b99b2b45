"""User-intent mapping for interactive front ends."""

from planet_sim.ui.controls import KEY_BINDINGS, handle_key

__all__ = ["KEY_BINDINGS", "handle_key"]
