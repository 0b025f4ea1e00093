"""
Word-vector style similarity search using hyperlsh

This script builds an AggregateIndex over random unit vectors (stand-ins
for word embeddings), then compares the approximate top results against
an exact linear scan.
"""

import time

import numpy as np
from hyperlsh import AggregateIndex, distance_from_lookup, random_unit_vectors


def main():
    dimension = 300
    rng = np.random.default_rng(2024)

    # Clustered data: each "word" sits near one of a few hundred "topics"
    print("Generating vectors...")
    topics = random_unit_vectors(400, dimension, rng)
    vectors = np.repeat(topics, 25, axis=0) + rng.normal(scale=0.02, size=(10000, dimension))
    vectors /= np.linalg.norm(vectors, axis=1, keepdims=True)
    print(f"Generated {len(vectors)} vectors in {dimension} dimensions")

    print("\nTuning plane count...")
    planes = AggregateIndex.autotune_planes(dimension, 25.0, vectors, rng=rng)
    print(f"Using {planes} planes per sub-index")

    index = AggregateIndex(dimension=dimension, sub_index_count=15, planes=planes, rng=rng)
    index.fit(vectors)
    for i, sub in enumerate(index.indices[:3]):
        stats = sub.stats()
        print(f"  sub-index {i}: {sub.groups_count} groups, "
              f"sizes min={stats.min} mean={stats.mean:.1f} max={stats.max}")

    distance = distance_from_lookup(vectors.__getitem__, metric="cosine")
    query = vectors[0]

    print("\n" + "=" * 60)
    print("LINEAR SCAN")
    print("=" * 60)
    start = time.perf_counter()
    linear = sorted(range(len(vectors)), key=lambda key: distance(query, key))[:20]
    print(f"{time.perf_counter() - start:.4f} seconds")

    print("\n" + "=" * 60)
    print("INDEX")
    print("=" * 60)
    start = time.perf_counter()
    results = index.nearest(query, 20, distance)
    print(f"{time.perf_counter() - start:.4f} seconds")

    for node in results[:10]:
        print(f"  key={node.key:<6} distance={node.distance:.4f}")

    overlap = set(linear) & {node.key for node in results}
    print(f"\nOverlap with linear scan: {len(overlap)}/20")


if __name__ == "__main__":
    main()
