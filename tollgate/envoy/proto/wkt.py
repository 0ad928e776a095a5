# Copyright 2026 Datawire.  All rights reserved.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License

"""Package tollgate.envoy.proto.wkt (wkt = well-known-types) provides types for the
`google.protobuf` Protobuf package.

This is hand-written, and thus incomplete.

"""

from typing import TypedDict

# Duration is `google.protobuf.Duration`, in its JSON form ("100s").
Duration = str

STRING_VALUE_TYPE = "type.googleapis.com/google.protobuf.StringValue"


# StringValue is `google.protobuf.StringValue` packed in an Any, so it carries its "@type".
StringValue = TypedDict("StringValue", {"@type": str, "value": str})
