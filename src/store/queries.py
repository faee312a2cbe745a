"""GraphQL documents sent to the store's Admin API."""

from __future__ import annotations

GET_DEFINITION = """
query GetDefinition($type: String!) {
  metaobjectDefinitionByType(type: $type) {
    id
    name
    type
    displayNameKey
    fieldDefinitions { name key type { name } required }
  }
}
"""

CREATE_DEFINITION = """
mutation CreateDefinition($definition: MetaobjectDefinitionCreateInput!) {
  metaobjectDefinitionCreate(definition: $definition) {
    metaobjectDefinition {
      id
      name
      type
      fieldDefinitions { key type { name } }
    }
    userErrors { field message code }
  }
}
"""

UPDATE_DEFINITION = """
mutation UpdateDefinition($id: ID!, $definition: MetaobjectDefinitionUpdateInput!) {
  metaobjectDefinitionUpdate(id: $id, definition: $definition) {
    metaobjectDefinition {
      id
      name
      type
      fieldDefinitions { key type { name } }
    }
    userErrors { field message code }
  }
}
"""

CREATE_FILE = """
mutation CreateFile($files: [FileCreateInput!]!) {
  fileCreate(files: $files) {
    files { id alt fileStatus }
    userErrors { field message code }
  }
}
"""

UPSERT_METAOBJECT = """
mutation UpsertMetaobject(
  $handle: MetaobjectHandleInput!,
  $metaobject: MetaobjectUpsertInput!
) {
  metaobjectUpsert(handle: $handle, metaobject: $metaobject) {
    metaobject { id handle type }
    userErrors { field message code }
  }
}
"""
