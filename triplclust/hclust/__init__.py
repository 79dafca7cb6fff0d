"""Hierarchical agglomerative clustering on condensed distance matrices, with R-style dendrogram output."""