"""Mummy core: context, registry, planning, mummification and manifest."""
