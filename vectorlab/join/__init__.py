from .attribute import attribute_join, read_lookup_table
from .spatial import spatial_predicate_join
