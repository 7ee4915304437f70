import base64
import gzip
import struct
import xml.etree.ElementTree as ET
import zlib

import pytest
import zstandard


def pack_gids(gids, compression=None):
    """Encode gids the way Tiled writes base64 tile data."""
    raw = struct.pack('<%dI' % len(gids), *gids)
    if compression == 'zlib':
        raw = zlib.compress(raw)
    elif compression == 'gzip':
        raw = gzip.compress(raw)
    elif compression == 'zstd':
        raw = zstandard.ZstdCompressor().compress(raw)
    return base64.b64encode(raw).decode('ascii')


@pytest.fixture
def xml():
    """Parse an XML snippet into an element."""
    return ET.fromstring


TERRAIN_TSX = """<?xml version="1.0" encoding="UTF-8"?>
<tileset version="1.10" name="terrain" tilewidth="16" tileheight="16"
         tilecount="32" columns="8">
 <image source="terrain.png" width="128" height="64"/>
 <properties>
  <property name="biome" value="forest"/>
 </properties>
 <tile id="3">
  <animation>
   <frame tileid="3" duration="100"/>
   <frame tileid="4" duration="150"/>
  </animation>
 </tile>
</tileset>
"""

SAMPLE_TMX = """<?xml version="1.0" encoding="UTF-8"?>
<map version="1.10" tiledversion="1.10.2" orientation="orthogonal"
     renderorder="right-down" width="4" height="2" tilewidth="16"
     tileheight="16" infinite="0" nextlayerid="6" nextobjectid="4"
     backgroundcolor="#202040" futureattribute="whatever">
 <properties>
  <property name="title" value="Sample"/>
  <property name="gravity" type="float" value="9.8"/>
 </properties>
 <tileset firstgid="1" name="inline" tilewidth="16" tileheight="16"
          tilecount="32" columns="8">
  <image source="inline.png" width="128" height="64"/>
  <tile id="0">
   <properties>
    <property name="solid" type="bool" value="true"/>
   </properties>
  </tile>
 </tileset>
 <tileset firstgid="33" source="tilesets/terrain.tsx"/>
 <layer id="1" name="Ground" width="4" height="2">
  <data encoding="csv">
1,2,3,4,
33,36,0,2147483649
</data>
 </layer>
 <objectgroup id="2" name="Things" draworder="index">
  <object id="1" name="spawn" x="10" y="20">
   <point/>
  </object>
  <object id="2" name="chest" gid="36" x="32" y="32" width="16" height="16"/>
  <object id="3" name="zone" x="0" y="0">
   <polygon points="0,0 10,0 10,10"/>
  </object>
 </objectgroup>
 <imagelayer id="3" name="Sky" offsetx="5" offsety="-5" opacity="0.5">
  <image source="sky.png" width="640" height="480"/>
 </imagelayer>
 <group id="4" name="Decor">
  <layer id="5" name="Flowers" width="4" height="2">
   <data>
    <tile gid="1"/><tile/><tile/><tile/>
    <tile/><tile/><tile/><tile gid="40"/>
   </data>
  </layer>
 </group>
 <editorsettings><export format="json"/></editorsettings>
</map>
"""


@pytest.fixture
def sample_files():
    return {'tilesets/terrain.tsx': TERRAIN_TSX}
