"""Host adapters: kernel message mapping, feeds and schedulers."""
