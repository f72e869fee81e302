import time
import numpy as np
import pandas as pd
from VoxelSurf.mesh import Mesh


def sphere_field(n):
    x, y, z = np.mgrid[-1 : 1 : n * 1j, -1 : 1 : n * 1j, -1 : 1 : n * 1j]
    return 1.0 - np.sqrt(x**2 + y**2 + z**2)


def run_benchmark():
    resolutions = [16, 32, 48]
    methods = ["isosurface", "boundary_faces"]
    results = []

    print(f"{'Resolution':<10} | {'Method':<15} | {'Triangles':<10} | {'Time (s)':<10}")
    print("-" * 55)

    for n in resolutions:
        field = sphere_field(n)
        for method in methods:
            mesh = Mesh()
            start_time = time.perf_counter()
            if method == "isosurface":
                mesh.make_from_voxels(field, 1.0 / n, level=0.2)
            else:
                mesh.make_from_voxels(field > 0.2, 1.0 / n)
            data = mesh.to_bytes()
            end_time = time.perf_counter()

            elapsed = end_time - start_time
            results.append(
                {
                    "Resolution": n,
                    "Method": method,
                    "Triangles": mesh.n_triangles,
                    "Bytes": len(data),
                    "Time": elapsed,
                }
            )
            print(f"{n:<10} | {method:<15} | {mesh.n_triangles:<10} | {elapsed:.4f}")

    return pd.DataFrame(results)


df = run_benchmark()
summary = df.pivot_table(index="Resolution", columns="Method", values="Time")
print("\nSlowdown (isosurface vs boundary faces):")
summary["Slowdown (x)"] = summary["isosurface"] / summary["boundary_faces"]
print(summary)
