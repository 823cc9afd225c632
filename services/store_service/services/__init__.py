"""Plain-data business routines used by the store routers."""
