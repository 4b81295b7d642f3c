"""Infrastructure layer for neo-confcache: storage backends, template
loading and reload drivers.
"""
