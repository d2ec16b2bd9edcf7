# particle_instance.py

"""
Render Contract

Defines the fixed memory layout of the per-instance records produced by
Simulation.instances(). The records are copied byte-for-byte into a GPU
instance buffer, so the layout is packed little-endian float32 with no padding:

    field     type       offset  shader location
    position  float32x2  0       5
    color     float32x3  8       6
    radius    float32    20      7   (radius-bearing variant only)

The radius-bearing record is 24 bytes, the plain variant 20 bytes.
"""

from collections import namedtuple

import numpy as np

import constants

INSTANCE_DTYPE = np.dtype([
    ('position', '<f4', (2,)),
    ('color', '<f4', (3,)),
    ('radius', '<f4'),
])

INSTANCE_DTYPE_NO_RADIUS = np.dtype([
    ('position', '<f4', (2,)),
    ('color', '<f4', (3,)),
])

# A single instance record, detached from any array.
class ParticleInstance(namedtuple('ParticleInstance', ['position', 'color', 'radius'])):
    __slots__ = ()

    @classmethod
    def from_record(cls, record):
        """Builds a ParticleInstance from one element of an instance array."""
        radius = record['radius'] if 'radius' in record.dtype.names else None
        return cls(
            position=np.array(record['position'], dtype=np.float32),
            color=np.array(record['color'], dtype=np.float32),
            radius=None if radius is None else np.float32(radius),
        )


VertexAttribute = namedtuple('VertexAttribute', ['shader_location', 'offset', 'format'])
InstanceBufferLayout = namedtuple('InstanceBufferLayout', ['array_stride', 'step_mode', 'attributes'])


def instance_dtype(with_radius: bool = True) -> np.dtype:
    return INSTANCE_DTYPE if with_radius else INSTANCE_DTYPE_NO_RADIUS


def instance_buffer_layout(with_radius: bool = True) -> InstanceBufferLayout:
    """
    Describes the instance buffer for a GPU pipeline: stride, step mode, and
    one attribute per field mapped to its shader location and byte offset.
    """
    dtype = instance_dtype(with_radius)
    attributes = [
        VertexAttribute(constants.INSTANCE_POSITION_LOCATION, dtype.fields['position'][1], 'float32x2'),
        VertexAttribute(constants.INSTANCE_COLOR_LOCATION, dtype.fields['color'][1], 'float32x3'),
    ]
    if with_radius:
        attributes.append(
            VertexAttribute(constants.INSTANCE_RADIUS_LOCATION, dtype.fields['radius'][1], 'float32')
        )
    return InstanceBufferLayout(array_stride=dtype.itemsize, step_mode='instance', attributes=attributes)
