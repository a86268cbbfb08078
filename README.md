# kitolib

A small toolkit of building blocks for games, written in plain Python with
no third-party dependencies.

## What is inside

- `kitolib.vecmath` – immutable `Vec2`, `Vec3`, `Vec4`, `Quat` and `Mat4`
  (column-major), plus helpers such as `clamp`, `cross_2d`, `decompose`,
  `q_interpolate` and `vec3_to_quat`.
- `kitolib.priorityqueue` – a min-priority `PriorityQueue`; equal
  priorities come out in insertion order.
- `kitolib.filemetadata` – `get_file_metadata` and
  `get_file_metadata_recursive`, which map file names (without extension)
  to `FileMetaData` for files with the given extensions.
- `kitolib.logs` – `StdOutLogger` (time-stamped lines, standard error by
  default), `EmptyLogger`, and `debug` / `debug1`, which print depending on
  the module-level `logging_level`.
- `kitolib.modelspec` – data classes describing meshes, materials,
  skeletons (`JointSpec`) and animations (`AnimationSpec`, `KeyFrame`,
  `JointTransform`).
- `kitolib.pprint` – short text renderings of vectors (`pprint_vec`,
  `pprint_vec_list`, `pprint_quat_as_vec`).
- `kitolib.collider` – `BoundingBox`, `Plane`, `Ray`, `Line`, `Capsule`,
  `Sphere`, `Triangle` and `TriMesh`, with transforms and builders such as
  `bounding_box_from_vertices`, `capsule_from_vertices` and
  `trimesh_from_primitives`.
- `kitolib.checks` – geometric queries: ray/plane, ray/triangle and
  ray/tri-mesh intersection, closest points between segments, segments and
  triangles, and infinite lines, point-in-triangle and point-in-AABB.
  Queries without an answer return `None`.
- `kitolib.collision` – `Contact` generation for capsule against triangle,
  tri-mesh and capsule, AABB overlap, and `sorted_by_separating_distance`.
- `kitolib.geometry` – convex `Polygon`s on the XZ plane with
  counter-clockwise winding; borders count as inside for `contains_point`.
- `kitolib.navmesh` – a `NavMesh` built from polygons that share edges.
- `kitolib.pathfinding` – a `Planner` running A* over the navmesh, with
  funnel smoothing (`smooth_path`) of the result.
- `kitolib.spatialpartition` – a uniform grid, centred on the origin, for
  broad-phase entity queries.
- `kitolib.weights` – `fill_weights` pads or trims joint weights to a
  fixed count; `normalize_weights` scales them to sum to one.
- `kitolib.animation` – an `AnimationPlayer` that interpolates key frames
  and blends between animations, producing model-space joint transforms.
- `kitolib.behavior` – behavior-tree nodes: `Sequence`, `Selector`,
  `Value`, and `Set` / `Get` nodes created from a shared `Memory`.
- `kitolib.inputs` – an `InputCollector` that accumulates keyboard and
  mouse events into a per-frame `Input`, and `null_input_poller`.
- `kitolib.metrics` – a `MetricsRegistry` reporting the latest value and
  one-second sums and averages per name.
- `kitolib.network` – a TCP `Server` that assigns each connection an
  increasing id, a `Client` (obtained with `connect`) that sends and queues
  line-delimited JSON `Message`s, and `deserialize_body`.
- `kitolib.physics` and `kitolib.assets` – plain descriptions of collider
  shapes, fonts, glyphs and textures.

## What it does not do

The package has no rendering: there is no shader, texture or font loading,
and `assets.Font`, `assets.Texture` and `assets.AssetManager` only describe
data. It does not read input from a window or device; `InputCollector` is
fed by the caller. It reads no model files; `modelspec` objects are built
by the caller. There is no command-line program.

## Installation

```
pip install .
```

For running the tests:

```
pip install ".[test]"
pytest
```

## Example: finding a path on a navmesh

```python
from kitolib.geometry import Polygon
from kitolib.navmesh import NavMesh
from kitolib.pathfinding import Planner
from kitolib.vecmath import Vec3


def square(x, z, size=6.0):
    return Polygon([
        Vec3(x, 0.0, z),
        Vec3(x, 0.0, z + size),
        Vec3(x + size, 0.0, z + size),
        Vec3(x + size, 0.0, z),
    ])


navmesh = NavMesh([square(0, 0), square(6, 0), square(12, 0)])
planner = Planner()
planner.set_nav_mesh(navmesh)
print(planner.find_path(Vec3(1.0, 0.0, 1.0), Vec3(17.0, 0.0, 5.0)))
```

`find_path` returns the points from start to goal inclusive, or `None`
when either point lies outside the mesh or no path connects them.

## Example: a behavior tree

```python
from datetime import timedelta

from kitolib.behavior import AIState, Memory, Sequence, Status, Value

memory = Memory()
sequence = Sequence()
sequence.add_child(Value(42))
sequence.add_child(memory.set("answer"))
sequence.add_child(memory.get("answer"))

output, status = sequence.tick(None, AIState(), timedelta(milliseconds=16))
assert status is Status.SUCCESS
```

## Example: a priority queue

```python
from kitolib.priorityqueue import PriorityQueue

queue = PriorityQueue()
queue.push("later", 3)
queue.push("first", 0)
print(queue.pop())  # "first"
```