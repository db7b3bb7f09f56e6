# cgl

Building blocks for computer-graphics programs, in pure Python with no
dependencies outside the standard library.

## What is inside

- `cgl.vectors`: `Vector2D`, `Vector3D` and `Vector4D` dataclasses with
  component-wise `+`, `-`, negation, scalar `*` and `/`, indexing and
  iteration, plus `norm()` and `norm2()`. `Vector2D.unit()` and
  `Vector4D.unit()` give unit vectors (`Vector4D.unit()` sets `w` to zero),
  `Vector4D.normalize()` scales in place, and `Vector4D.to_3d()` /
  `project_to_3d()` convert to 3D. The free functions `dot(u, v)` and
  `cross(u, v)` work on vectors of the same type; `cross` gives a scalar
  for 2D vectors and a `Vector3D` for 3D vectors.
- `cgl.matrix`: `Matrix3x3` and `Matrix4x4`, stored column by column.
  Entries are read and written as `m[i, j]` (row i, column j), and `m[j]`
  or `m.column(j)` gives a column vector. They support `+`, `+=`, `-`,
  negation, scalar `*` and `/`, `/=`, matrix and matrix-vector products with
  `*` or `a @ b`, and `det()`, `norm()` (Frobenius), `transpose()`, `inv()`,
  `zero(val)` and the static `identity()`. `Matrix3x3.cross_product(u)`
  builds the matrix of a cross product with `u`, and `outer(u, v)` the outer
  product of two 3D or two 4D vectors. `inv()` of a singular matrix raises
  `ZeroDivisionError`.
- `cgl.color`: `Color` and `Spectrum` with channels `r`, `g`, `b`.
  `Color.from_hex("#ff8000")` and `Color.from_bytes(b"...")` build colours
  from byte values, `to_hex()` writes the clamped channels as hexadecimal
  without zero padding, and `Color.WHITE` / `Color.BLACK` are provided.
- `cgl.algebra`: `Complex` (`x + y i`) and `Quaternion` (`x i + y j + z k + w`)
  with readable `str()` forms.
- `cgl.base64codec`: `base64_encode(data)` returns padded base64 text;
  `base64_decode(encoded)` is lenient and stops at the first `=` or at the
  first character outside the base64 alphabet.
- `cgl.timer`: `Timer` with `start()`, `stop()` and `duration()` in seconds
  on a monotonic clock; it also works as a context manager.
- `cgl.renderer`: `Renderer`, an abstract base class. Subclasses implement
  `init`, `render`, `resize`, `name` and `info`; `cursor_event`,
  `scroll_event`, `mouse_event` and `keyboard_event` do nothing unless
  overridden, and `use_hdpi_render_target()` sets `use_hdpi`.
- `cgl.paths`: `resolve_path(filename)` returns the absolute path with
  symbolic links resolved, raising `FileNotFoundError` if the file is missing.
- `cgl.xmlutil`, `cgl.xmlnodes`, `cgl.xmldocument`: a small XML DOM.
  `XMLDocument` parses text or files (`parse`, `load_file`), creates nodes
  (`new_element`, `new_text`, `new_comment`, `new_declaration`,
  `new_unknown`), and writes them out (`save_file`, `print_to`). Errors are
  raised as `XMLException` and also kept in `error_id`, with `error_name()`
  and `print_error()`. `XMLPrinter` writes to a file object or, without one,
  to a buffer read back with `getvalue()`. Elements offer typed access to
  attributes and text (`int_value`, `bool_text`, `double_text`, ...).

## Installation

```
pip install .
```

## Examples

```python
from cgl.vectors import Vector3D, dot, cross
from cgl.matrix import Matrix3x3

a = Vector3D(1.0, 0.0, 0.0)
b = Vector3D(0.0, 1.0, 0.0)
print(dot(a, b))                # 0.0
print(cross(a, b))              # (0,0,1)

m = Matrix3x3.identity()
print(m.det())                  # 1.0
print(m.inv().transpose())
```

```python
from cgl.xmldocument import XMLDocument, XMLPrinter

doc = XMLDocument()
doc.parse("<scene><camera fov='45'/></scene>")
camera = doc.first_child_element("scene").first_child_element("camera")
print(camera.find_attribute("fov").int_value())   # 45

printer = XMLPrinter()
doc.print_to(printer)
print(printer.getvalue())
```

## What this package does not do

There is no window, viewer or event loop, no on-screen text display and no
drawing of any kind. `Renderer` only defines the interface that such a
viewer would call; drawing is left to your subclass and whatever graphics
library it uses. There is no command-line program.

## Running the tests

```
pip install .[test]
pytest
```