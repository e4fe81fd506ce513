"""Core pattern generators for the pool sketch.

Modules:
- noise: seeded smooth noise field (p5-style value noise)
- motion: bounded noise-driven drift shared by ripple points and rings
- ripple: Worley-noise water ripple rasterizer
- grid: noise-distorted quad mesh background
- rings: swim ring composition and non-overlapping layout
- scene: per-frame orchestration and resize handling
"""
